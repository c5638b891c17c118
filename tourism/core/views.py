import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.db import connection, DatabaseError
from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone

from tourism.notifications.services import notify_admins, notify_user

from .cache_utils import cached_public_response, TAG_SEARCH
from .models import Setting, AuditLog
from .pagination import paginate_queryset
from .permissions import IsAdminRole, is_active_editor, is_admin
from .serializers import (
    UserSerializer, UserCreateSerializer, UserRoleSerializer,
    SettingSerializer, AuditLogSerializer
)
from .targets import describe_target, get_target_model
from .utils import create_audit_log

logger = logging.getLogger(__name__)

User = get_user_model()

SEARCH_LIMIT = 20


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        # Blocked accounts are deactivated
        if not self.user.is_active or self.user.banned_at is not None:
            raise AuthenticationFailed('User account is disabled.')
        data['user'] = UserSerializer(self.user).data
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = user.role
        token['is_approved'] = user.is_approved
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Custom token refresh serializer that handles deleted users gracefully"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            # User referenced in token doesn't exist anymore
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    """Custom token refresh view that handles deleted users gracefully"""
    serializer_class = CustomTokenRefreshSerializer


def user_payload(user):
    data = UserSerializer(user).data
    data['is_admin'] = is_admin(user)
    data['is_active_editor'] = is_active_editor(user)
    return data


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new editor account (awaits admin approval)"""
    serializer = UserCreateSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        logger.info(f"New user registered: {user.username}")
        notify_admins(
            'new_user',
            f"New user registered: {user.username}",
            message='A new editor account is waiting for approval.',
            actor=user,
            action_url='/dashboard/users',
        )
        token = CustomTokenObtainPairSerializer.get_token(user)
        return Response({
            'user': user_payload(user),
            'access': str(token.access_token),
            'refresh': str(token),
        }, status=status.HTTP_201_CREATED)
    logger.warning(f"Registration validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get or update the current user's profile"""
    if request.method == 'PATCH':
        serializer = UserSerializer(request.user, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer.save()
    return Response(user_payload(request.user))


# User management views (admin only)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_list(request):
    """List users, filterable by role, approval and ban state"""
    queryset = User.objects.all()

    role = request.query_params.get('role')
    if role:
        queryset = queryset.filter(role=role)
    approved = request.query_params.get('is_approved')
    if approved in ('true', 'false'):
        queryset = queryset.filter(is_approved=approved == 'true')
    banned = request.query_params.get('banned')
    if banned in ('true', 'false'):
        queryset = queryset.filter(banned_at__isnull=banned == 'false')
    search = request.query_params.get('search', '').strip()
    if search:
        queryset = queryset.filter(
            Q(username__icontains=search) | Q(email__icontains=search) |
            Q(first_name__icontains=search) | Q(last_name__icontains=search)
        )

    queryset = queryset.order_by('-date_joined')
    return Response(paginate_queryset(request, queryset, UserSerializer))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_counts(request):
    return Response({
        'total': User.objects.count(),
        'admins': User.objects.filter(role=User.ROLE_ADMIN).count(),
        'editors': User.objects.filter(role=User.ROLE_EDITOR).count(),
        'pending': User.objects.filter(role=User.ROLE_EDITOR, is_approved=False, banned_at__isnull=True).count(),
        'banned': User.objects.filter(banned_at__isnull=False).count(),
    })


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        return Response(UserSerializer(user).data)
    elif request.method == 'PATCH':
        serializer = UserSerializer(user, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request, 'user_change', 'User', user.pk,
                changes={k: str(v) for k, v in serializer.validated_data.items()},
                object_name=user.username,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if user.pk == request.user.pk:
            return Response({'error': 'You cannot delete your own account'}, status=status.HTTP_400_BAD_REQUEST)
        username = user.username
        user.delete()
        create_audit_log(request, 'delete', 'User', pk, object_name=username)
        logger.info(f"User {username} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)


def _update_user_state(request, user, action, **fields):
    for field, value in fields.items():
        setattr(user, field, value)
    user.save(update_fields=list(fields) + ['updated_at'])
    create_audit_log(
        request, 'user_change', 'User', user.pk,
        changes={'action': action, **{k: str(v) for k, v in fields.items()}},
        object_name=user.username,
    )
    logger.info(f"User {user.username}: {action} by {request.user.username}")
    return Response(UserSerializer(user).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_activate(request, pk):
    """Approve an editor account"""
    user = get_object_or_404(User, pk=pk)
    was_approved = user.is_approved
    response = _update_user_state(request, user, 'activate', is_approved=True)
    if not was_approved:
        notify_user(
            user, 'verified', 'Your account has been approved',
            message='You can now create and edit content.',
            actor=request.user,
            action_url='/dashboard',
        )
    return response


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_deactivate(request, pk):
    """Withdraw approval without banning"""
    user = get_object_or_404(User, pk=pk)
    if user.pk == request.user.pk:
        return Response({'error': 'You cannot deactivate your own account'}, status=status.HTTP_400_BAD_REQUEST)
    return _update_user_state(request, user, 'deactivate', is_approved=False)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_block(request, pk):
    """Ban a user: they can no longer log in"""
    user = get_object_or_404(User, pk=pk)
    if user.pk == request.user.pk:
        return Response({'error': 'You cannot block your own account'}, status=status.HTTP_400_BAD_REQUEST)
    return _update_user_state(request, user, 'block', banned_at=timezone.now(), is_active=False)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_unblock(request, pk):
    user = get_object_or_404(User, pk=pk)
    return _update_user_state(request, user, 'unblock', banned_at=None, is_active=True)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_role(request, pk):
    """Change a user's role"""
    user = get_object_or_404(User, pk=pk)
    serializer = UserRoleSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    role = serializer.validated_data['role']
    if user.pk == request.user.pk and role != User.ROLE_ADMIN:
        return Response({'error': 'You cannot remove your own admin role'}, status=status.HTTP_400_BAD_REQUEST)
    return _update_user_state(request, user, 'role', role=role)


# Setting views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def setting_list_create(request):
    """List all settings or create a new setting"""
    if request.method == 'GET':
        settings = Setting.objects.all().order_by('key')
        serializer = SettingSerializer(settings, many=True)
        return Response(serializer.data)
    else:
        serializer = SettingSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def setting_detail(request, pk):
    """Retrieve, update or delete a setting"""
    setting = get_object_or_404(Setting, pk=pk)

    if request.method == 'GET':
        serializer = SettingSerializer(setting)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SettingSerializer(setting, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        setting.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs with filtering; non-admins only see their own entries"""
    queryset = AuditLog.objects.select_related('user')

    if not is_admin(request.user):
        queryset = queryset.filter(user=request.user)

    action_filter = request.query_params.get('action', None)
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    date_from = request.query_params.get('date_from', None)
    date_to = request.query_params.get('date_to', None)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    queryset = queryset.order_by('-created_at')
    return Response(paginate_queryset(request, queryset, AuditLogSerializer, default_limit=50))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(AuditLog, pk=pk)

    if not is_admin(request.user) and audit_log.user != request.user:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    serializer = AuditLogSerializer(audit_log)
    return Response(serializer.data)


SEARCH_FIELDS = {
    'post': ('posts', ['title', 'short_description']),
    'region': ('regions', ['name', 'description']),
    'video': ('videos', ['title', 'description']),
    'photo': ('photos', ['title', 'description']),
    'hotel': ('hotels', ['name', 'description']),
}


@api_view(['GET'])
@permission_classes([AllowAny])
@cached_public_response('global_search', [TAG_SEARCH])
def global_search(request):
    """Search published posts, regions, videos, photo features and hotels"""
    query = request.query_params.get('q', '').strip()

    if not query:
        return Response({key: [] for key, _ in SEARCH_FIELDS.values()})

    results = {}
    for target_type, (key, fields) in SEARCH_FIELDS.items():
        model = get_target_model(target_type)
        condition = Q()
        for field in fields:
            condition |= Q(**{f'{field}__icontains': query})
        matches = model.objects.published().filter(condition).order_by('-published_at')[:SEARCH_LIMIT]
        results[key] = [describe_target(target_type, obj) for obj in matches]

    return Response(results)


@api_view(['GET'])
@permission_classes([AllowAny])
def health(request):
    try:
        connection.ensure_connection()
    except DatabaseError as e:
        logger.error(f"Health check failed: {str(e)}")
        return Response({'status': 'error', 'database': 'unavailable'}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response({'status': 'ok'})
