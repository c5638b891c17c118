# Generated manually
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ContentLink',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('source_type', models.CharField(choices=[('post', 'Post'), ('region', 'Region')], max_length=20)),
                ('source_id', models.UUIDField()),
                ('target_type', models.CharField(choices=[('photo', 'Photo'), ('video', 'Video'), ('post', 'Post')], max_length=20)),
                ('target_id', models.UUIDField()),
                ('display_order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'content_links',
                'ordering': ['display_order', 'created_at'],
                'indexes': [
                    models.Index(fields=['source_type', 'source_id'], name='content_links_source_idx'),
                    models.Index(fields=['target_type', 'target_id'], name='content_links_target_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('source_type', 'source_id', 'target_type', 'target_id'), name='content_links_pair_uniq'),
                ],
            },
        ),
    ]
