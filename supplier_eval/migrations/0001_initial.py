import operator
from functools import reduce

from django.db import migrations, models

SCORE_FIELDS = [
    ('portfolio_diversity', 'Portfolio diversity'),
    ('credit_term', 'Credit Term offered'),
    ('capacity_utilisation', 'Capacity Outlook'),
    ('strategic_partnership', 'Strategic Partnership Score'),
    ('business_etiquette', 'Business Etiquette & Response Time'),
    ('inventory_carrying', 'Inventory carrying'),
    ('advance_notice', 'Advance shipment notice'),
    ('knowledge_sharing', 'Knowledge Sharing / Cont. Improvement Ideas'),
    ('legal_contracts', 'Legal contracts'),
    ('cost_competitiveness', 'Cost Competitiveness'),
    ('cost_model', 'Cost Model'),
    ('sdp_rating', 'SDP Rating'),
    ('quality_glo', 'Quality Performance Rating (GLO)'),
    ('quality_gsqa_ing', 'Quality Performance Rating (GSQA - ING)'),
    ('sc_notification', 'Supply Chain Notification'),
    ('supplier_audit', 'Supplier Surveillance Audit'),
    ('labelling_rating', 'Labelling rating'),
    ('supplier_quality', 'Supplier quality'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='SupplierEvaluation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='记录创建时自动填充', verbose_name='创建时间')),
                ('category', models.CharField(db_index=True, max_length=50, verbose_name='品类')),
                ('sub_category', models.CharField(blank=True, db_index=True, max_length=50, verbose_name='子品类')),
                ('supplier_name', models.CharField(db_index=True, max_length=200, verbose_name='供应商名称')),
                ('evaluation_month', models.CharField(help_text='例如: 2025-03 或 2025-03-15', max_length=20, verbose_name='评价月份')),
            ] + [
                (name, models.DecimalField(decimal_places=2, default=0, max_digits=6, verbose_name=label))
                for name, label in SCORE_FIELDS
            ] + [
                ('total_score', models.GeneratedField(
                    db_persist=True,
                    expression=reduce(operator.add, [models.F(name) for name, _ in SCORE_FIELDS]),
                    output_field=models.DecimalField(decimal_places=2, max_digits=8),
                    verbose_name='总分',
                )),
            ],
            options={
                'verbose_name': '供应商绩效评价',
                'verbose_name_plural': '供应商绩效评价',
                'db_table': 'supplier_evaluations',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
