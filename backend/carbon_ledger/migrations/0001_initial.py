# Initial ledger schema

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Farm',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('farm_id', models.CharField(editable=False, help_text='Derived farm identifier', max_length=64, primary_key=True, serialize=False)),
                ('owner', models.CharField(db_index=True, help_text='Identity of the farm owner', max_length=64)),
                ('latitude', models.BigIntegerField(help_text='Latitude in micro-degrees', validators=[django.core.validators.MinValueValidator(-90000000), django.core.validators.MaxValueValidator(90000000)])),
                ('longitude', models.BigIntegerField(help_text='Longitude in micro-degrees', validators=[django.core.validators.MinValueValidator(-180000000), django.core.validators.MaxValueValidator(180000000)])),
                ('area_hectares', models.PositiveBigIntegerField(help_text='Farm area in hectares', validators=[django.core.validators.MinValueValidator(1)])),
                ('baseline_carbon', models.PositiveBigIntegerField(help_text='Baseline soil carbon level (x100)', validators=[django.core.validators.MinValueValidator(1)])),
                ('registration_tick', models.PositiveBigIntegerField(help_text='Ledger tick at registration')),
                ('practices', models.JSONField(blank=True, default=list, help_text='Declared regenerative practices')),
                ('is_verified', models.BooleanField(db_index=True, default=False, help_text='Whether the platform authority verified this farm')),
                ('total_credits_issued', models.PositiveBigIntegerField(default=0, help_text='Cumulative credits issued against this farm (tonnes x100)')),
            ],
            options={
                'verbose_name': 'Farm',
                'verbose_name_plural': 'Farms',
                'db_table': 'ledger_farm',
                'ordering': ['registration_tick'],
            },
        ),
        migrations.CreateModel(
            name='LedgerSequence',
            fields=[
                ('id', models.PositiveSmallIntegerField(default=1, editable=False, primary_key=True, serialize=False)),
                ('value', models.PositiveBigIntegerField(default=0)),
            ],
            options={
                'db_table': 'ledger_sequence',
            },
        ),
        migrations.CreateModel(
            name='PlatformStatistics',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('id', models.PositiveSmallIntegerField(default=1, editable=False, primary_key=True, serialize=False)),
                ('total_credits_issued', models.PositiveBigIntegerField(default=0)),
                ('total_credits_sold', models.PositiveBigIntegerField(default=0)),
                ('total_revenue', models.PositiveBigIntegerField(default=0)),
                ('total_platform_fees', models.PositiveBigIntegerField(default=0)),
                ('total_verified_carbon', models.PositiveBigIntegerField(default=0)),
                ('average_price', models.PositiveBigIntegerField()),
                ('platform_fee_bps', models.PositiveIntegerField(validators=[django.core.validators.MaxValueValidator(10000)])),
            ],
            options={
                'verbose_name': 'Platform Statistics',
                'verbose_name_plural': 'Platform Statistics',
                'db_table': 'ledger_platform_statistics',
            },
        ),
        migrations.CreateModel(
            name='CorporateBuyer',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('buyer', models.CharField(help_text='Buyer identity', max_length=64, primary_key=True, serialize=False)),
                ('company_name', models.CharField(max_length=200)),
                ('registration_tick', models.PositiveBigIntegerField()),
                ('total_purchases', models.PositiveBigIntegerField(default=0, help_text='Cumulative purchased amount (tonnes x100)')),
                ('sustainability_goals', models.JSONField(blank=True, default=list)),
                ('is_verified', models.BooleanField(db_index=True, default=False)),
                ('credit_limit', models.PositiveBigIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
            ],
            options={
                'db_table': 'ledger_corporate_buyer',
                'ordering': ['registration_tick'],
            },
        ),
        migrations.CreateModel(
            name='Sensor',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('sensor_id', models.CharField(help_text='Caller supplied sensor identifier', max_length=32, primary_key=True, serialize=False)),
                ('sensor_type', models.CharField(help_text='Sensor hardware type', max_length=64)),
                ('latitude', models.BigIntegerField(help_text='Latitude in micro-degrees')),
                ('longitude', models.BigIntegerField(help_text='Longitude in micro-degrees')),
                ('installation_tick', models.PositiveBigIntegerField()),
                ('calibration_tick', models.PositiveBigIntegerField()),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('farm', models.ForeignKey(help_text='Farm the sensor is installed on', on_delete=django.db.models.deletion.PROTECT, related_name='sensors', to='carbon_ledger.farm')),
            ],
            options={
                'db_table': 'ledger_sensor',
                'ordering': ['installation_tick'],
            },
        ),
        migrations.CreateModel(
            name='CarbonMeasurement',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('measurement_id', models.CharField(editable=False, max_length=64, primary_key=True, serialize=False)),
                ('measurement_tick', models.PositiveBigIntegerField(db_index=True)),
                ('carbon_level', models.PositiveBigIntegerField(help_text='Carbon level (x100); overwritten by the verified level', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(100000)])),
                ('source_kind', models.CharField(choices=[('sensor', 'IoT Sensor'), ('satellite', 'Satellite Imagery')], db_index=True, max_length=16)),
                ('source_id', models.CharField(help_text='Sensor id or satellite provider', max_length=64)),
                ('confidence', models.PositiveSmallIntegerField(validators=[django.core.validators.MaxValueValidator(100)])),
                ('status', models.CharField(choices=[('pending', 'Pending Verification'), ('verified', 'Verified'), ('disputed', 'Disputed')], db_index=True, default='pending', max_length=16)),
                ('verifier', models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ('verification_tick', models.PositiveBigIntegerField(blank=True, null=True)),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='measurements', to='carbon_ledger.farm')),
            ],
            options={
                'db_table': 'ledger_carbon_measurement',
                'ordering': ['measurement_tick'],
                'indexes': [
                    models.Index(fields=['farm', 'status'], name='ledger_meas_farm_status_idx'),
                    models.Index(fields=['farm', 'verification_tick'], name='ledger_meas_farm_vtick_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SatelliteObservation',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('data_id', models.CharField(editable=False, max_length=64, primary_key=True, serialize=False)),
                ('provider', models.CharField(max_length=64)),
                ('image_tick', models.PositiveBigIntegerField()),
                ('ndvi', models.IntegerField(help_text='Vegetation index (x1000)', validators=[django.core.validators.MinValueValidator(-1000), django.core.validators.MaxValueValidator(1000)])),
                ('carbon_estimate', models.PositiveBigIntegerField(help_text='Estimated carbon level (x100)')),
                ('cloud_cover', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(100)])),
                ('quality_score', models.PositiveSmallIntegerField(validators=[django.core.validators.MaxValueValidator(100)])),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='satellite_observations', to='carbon_ledger.farm')),
                ('measurement', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='satellite_observation', to='carbon_ledger.carbonmeasurement')),
            ],
            options={
                'db_table': 'ledger_satellite_observation',
                'ordering': ['image_tick'],
            },
        ),
        migrations.CreateModel(
            name='MeasurementVerification',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('verification_id', models.CharField(editable=False, max_length=64, primary_key=True, serialize=False)),
                ('verifier', models.CharField(db_index=True, max_length=64)),
                ('method', models.CharField(max_length=64)),
                ('verified_level', models.PositiveBigIntegerField()),
                ('confidence', models.PositiveSmallIntegerField(validators=[django.core.validators.MaxValueValidator(100)])),
                ('verification_tick', models.PositiveBigIntegerField()),
                ('notes', models.CharField(blank=True, max_length=128)),
                ('measurement', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='verification', to='carbon_ledger.carbonmeasurement')),
            ],
            options={
                'db_table': 'ledger_measurement_verification',
                'ordering': ['verification_tick'],
            },
        ),
        migrations.CreateModel(
            name='CarbonCredit',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('credit_id', models.CharField(editable=False, max_length=64, primary_key=True, serialize=False)),
                ('farmer', models.CharField(db_index=True, help_text='Identity receiving sale proceeds', max_length=64)),
                ('issued_amount', models.PositiveBigIntegerField(help_text='Amount issued (tonnes x100)')),
                ('remaining_amount', models.PositiveBigIntegerField(help_text='Unsold balance (tonnes x100)')),
                ('vintage_year', models.PositiveIntegerField()),
                ('issuance_tick', models.PositiveBigIntegerField(db_index=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('verified', 'Verified'), ('sold', 'Sold'), ('retired', 'Retired')], db_index=True, default='verified', max_length=16)),
                ('unit_price', models.PositiveBigIntegerField(help_text='Price per unit including co-benefit premium')),
                ('co_benefits', models.JSONField(blank=True, default=list)),
                ('methodology', models.CharField(blank=True, max_length=128)),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='credits', to='carbon_ledger.farm')),
            ],
            options={
                'db_table': 'ledger_carbon_credit',
                'ordering': ['issuance_tick'],
                'indexes': [
                    models.Index(fields=['status', 'remaining_amount'], name='ledger_credit_status_rem_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CreditTransaction',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('transaction_id', models.CharField(editable=False, max_length=64, primary_key=True, serialize=False)),
                ('seller', models.CharField(db_index=True, max_length=64)),
                ('buyer', models.CharField(db_index=True, max_length=64)),
                ('amount', models.PositiveBigIntegerField()),
                ('unit_price', models.PositiveBigIntegerField()),
                ('total_price', models.PositiveBigIntegerField()),
                ('platform_fee', models.PositiveBigIntegerField()),
                ('farmer_payment', models.PositiveBigIntegerField()),
                ('co_benefit_premium', models.PositiveBigIntegerField()),
                ('transaction_tick', models.PositiveBigIntegerField(db_index=True)),
                ('credit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transactions', to='carbon_ledger.carboncredit')),
            ],
            options={
                'db_table': 'ledger_credit_transaction',
                'ordering': ['transaction_tick'],
            },
        ),
        migrations.CreateModel(
            name='PracticeVerification',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('verification_id', models.CharField(editable=False, max_length=64, primary_key=True, serialize=False)),
                ('practice', models.CharField(choices=[('cover-cropping', 'cover-cropping'), ('no-till', 'no-till'), ('rotational-grazing', 'rotational-grazing'), ('agroforestry', 'agroforestry'), ('composting', 'composting'), ('precision-ag', 'precision-ag')], max_length=32)),
                ('verifier', models.CharField(db_index=True, max_length=64)),
                ('compliance_score', models.PositiveSmallIntegerField(validators=[django.core.validators.MaxValueValidator(100)])),
                ('evidence_hash', models.CharField(blank=True, max_length=128)),
                ('verification_tick', models.PositiveBigIntegerField()),
                ('notes', models.CharField(blank=True, max_length=128)),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='practice_verifications', to='carbon_ledger.farm')),
            ],
            options={
                'db_table': 'ledger_practice_verification',
                'ordering': ['verification_tick'],
            },
        ),
        migrations.CreateModel(
            name='IncentivePayment',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when the record was last updated')),
                ('payment_id', models.CharField(editable=False, max_length=64, primary_key=True, serialize=False)),
                ('recipient', models.CharField(db_index=True, max_length=64)),
                ('amount', models.PositiveBigIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('payment_type', models.CharField(max_length=64)),
                ('payment_tick', models.PositiveBigIntegerField()),
                ('practice', models.CharField(blank=True, max_length=32)),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='incentive_payments', to='carbon_ledger.farm')),
            ],
            options={
                'db_table': 'ledger_incentive_payment',
                'ordering': ['payment_tick'],
            },
        ),
    ]
