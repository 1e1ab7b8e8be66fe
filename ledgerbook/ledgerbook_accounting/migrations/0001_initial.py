import uuid
from decimal import Decimal

import django.db.models.deletion
import django.db.models.functions.text
from django.conf import settings
from django.db import migrations, models

import ledgerbook_core.utils
import ledgerbook_core.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Ledger',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200, verbose_name='Ledger Name')),
                ('ledger_type', models.CharField(choices=[('asset', 'Asset'), ('liability', 'Liability'), ('income', 'Income'), ('expense', 'Expense'), ('equity', 'Equity')], db_index=True, max_length=20, verbose_name='Ledger Type')),
                ('balance', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=18, validators=[ledgerbook_core.validators.validate_non_negative_balance], verbose_name='Balance')),
                ('description', models.CharField(blank=True, max_length=500, verbose_name='Description')),
                ('is_active', models.BooleanField(db_index=True, default=True, verbose_name='Is Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='ledgers_created', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Ledger',
                'verbose_name_plural': 'Ledgers',
                'ordering': ['name'],
                'constraints': [
                    models.UniqueConstraint(django.db.models.functions.text.Lower('name'), condition=models.Q(('is_active', True)), name='unique_active_ledger_name_ci'),
                    models.CheckConstraint(condition=models.Q(('balance__gte', 0)), name='ledger_balance_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('deleted', models.DateTimeField(db_index=True, editable=False, null=True)),
                ('deleted_by_cascade', models.BooleanField(default=False, editable=False)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('voucher_number', models.CharField(editable=False, max_length=32, unique=True, verbose_name='Voucher Number')),
                ('date', models.DateField(db_index=True, default=ledgerbook_core.utils.today, verbose_name='Transaction Date')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=18, validators=[ledgerbook_core.validators.validate_positive_amount], verbose_name='Amount')),
                ('narration', models.CharField(max_length=1000, verbose_name='Narration')),
                ('transaction_type', models.CharField(choices=[('payment', 'Payment'), ('receipt', 'Receipt'), ('journal', 'Journal'), ('contra', 'Contra'), ('sales', 'Sales'), ('purchase', 'Purchase')], db_index=True, default='journal', max_length=20, verbose_name='Transaction Type')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transactions_created', to=settings.AUTH_USER_MODEL)),
                ('credit_ledger', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='credit_transactions', to='ledgerbook_accounting.ledger', verbose_name='Credit Ledger')),
                ('debit_ledger', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='debit_transactions', to='ledgerbook_accounting.ledger', verbose_name='Debit Ledger')),
                ('deleted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transactions_deleted', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Transaction',
                'verbose_name_plural': 'Transactions',
                'ordering': ['-date', '-created_at'],
                'indexes': [models.Index(fields=['created_by', '-date'], name='txn_creator_date_idx')],
                'constraints': [models.CheckConstraint(condition=models.Q(('amount__gt', 0)), name='transaction_amount_positive')],
            },
        ),
    ]
