# Generated manually
import django.db.models.deletion
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Comment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('target_type', models.CharField(choices=[('post', 'Post'), ('video', 'Video'), ('photo', 'Photo'), ('hotel', 'Hotel')], max_length=20)),
                ('target_id', models.UUIDField()),
                ('guest_name', models.CharField(max_length=100)),
                ('guest_email', models.EmailField(blank=True, max_length=254)),
                ('content', models.TextField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('spam', 'Spam'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=20)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('viewer_hash', models.CharField(blank=True, max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='replies', to='engagement.comment')),
            ],
            options={
                'db_table': 'comments',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['target_type', 'target_id', 'status'], name='comments_target_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='ContentLike',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('target_type', models.CharField(choices=[('post', 'Post'), ('video', 'Video'), ('photo', 'Photo')], max_length=20)),
                ('target_id', models.UUIDField()),
                ('viewer_hash', models.CharField(max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'content_likes',
                'constraints': [
                    models.UniqueConstraint(fields=('target_type', 'target_id', 'viewer_hash'), name='content_likes_viewer_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ContentView',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('target_type', models.CharField(choices=[('post', 'Post'), ('video', 'Video'), ('photo', 'Photo'), ('hotel', 'Hotel')], max_length=20)),
                ('target_id', models.UUIDField()),
                ('viewer_hash', models.CharField(max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                'db_table': 'content_views',
                'indexes': [models.Index(fields=['target_type', 'target_id', 'viewer_hash', 'created_at'], name='content_views_lookup_idx')],
            },
        ),
        migrations.CreateModel(
            name='ViewDailyAggregate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('target_type', models.CharField(choices=[('post', 'Post'), ('video', 'Video'), ('photo', 'Photo'), ('hotel', 'Hotel')], max_length=20)),
                ('target_id', models.UUIDField()),
                ('date', models.DateField()),
                ('view_count', models.PositiveIntegerField(default=0)),
                ('unique_viewers', models.PositiveIntegerField(default=0)),
            ],
            options={
                'db_table': 'content_view_daily',
                'ordering': ['-date'],
                'constraints': [
                    models.UniqueConstraint(fields=('target_type', 'target_id', 'date'), name='content_view_daily_uniq'),
                ],
            },
        ),
    ]
