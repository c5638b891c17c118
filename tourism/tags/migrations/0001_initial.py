# Generated manually
import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Tag',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100, unique=True)),
                ('slug', models.SlugField(blank=True, max_length=120, unique=True)),
                ('tag_type', models.CharField(choices=[('activity', 'Activity'), ('category', 'Category'), ('general', 'General')], db_index=True, default='general', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'tags',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ContentTag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('target_type', models.CharField(choices=[('post', 'Post'), ('video', 'Video'), ('photo', 'Photo'), ('hotel', 'Hotel')], max_length=20)),
                ('target_id', models.UUIDField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('tag', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='tags.tag')),
            ],
            options={
                'db_table': 'content_tags',
                'indexes': [models.Index(fields=['target_type', 'target_id'], name='content_tags_target_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('tag', 'target_type', 'target_id'), name='content_tags_uniq'),
                ],
            },
        ),
    ]
