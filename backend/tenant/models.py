import secrets
import string
import uuid

from django.db import models

from tenant.managers import TenantManager

INVITATION_CODE_LENGTH = 8
INVITATION_CODE_ALPHABET = string.ascii_uppercase + string.digits


class Tenant(models.Model):
    """
    Root entity for multi-tenancy.
    Each customer company (a restaurant operator) is a tenant.

    Subdomain structure: {slug}.example.com
    Example: sushi-taro.example.com
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(
        max_length=255,
        help_text="Display name for the company (e.g., Sushi Taro)"
    )
    slug = models.SlugField(
        unique=True,
        help_text="URL-safe identifier used in the subdomain"
    )
    contact_email = models.EmailField(blank=True)

    is_active = models.BooleanField(
        default=True,
        help_text="Inactive tenants cannot access the system"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tenants'
        ordering = ['name']
        indexes = [
            models.Index(fields=['slug'], name='tenants_slug_idx'),
            models.Index(fields=['is_active'], name='tenants_is_active_idx'),
        ]

    def __str__(self):
        return self.name


class Store(models.Model):
    """
    A shop operated by a tenant.

    Plans and schedules may be bound to a store; materials, products and
    units are shared across all stores of the tenant.
    """
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name='stores'
    )
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=20)
    invitation_code = models.CharField(
        max_length=INVITATION_CODE_LENGTH,
        unique=True,
        null=True,
        blank=True,
        help_text="Code staff enter to join this store"
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        db_table = 'stores'
        ordering = ['code']
        constraints = [
            models.UniqueConstraint(fields=['tenant', 'name'], name='unique_store_name_per_tenant'),
            models.UniqueConstraint(fields=['tenant', 'code'], name='unique_store_code_per_tenant'),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"

    def save(self, *args, **kwargs):
        if not self.invitation_code:
            self.invitation_code = self.generate_invitation_code()
        super().save(*args, **kwargs)

    @classmethod
    def generate_invitation_code(cls):
        while True:
            code = ''.join(secrets.choice(INVITATION_CODE_ALPHABET) for _ in range(INVITATION_CODE_LENGTH))
            if not cls.all_objects.filter(invitation_code=code).exists():
                return code

    def regenerate_invitation_code(self):
        self.invitation_code = self.generate_invitation_code()
        self.save(update_fields=['invitation_code', 'updated_at'])
        return self.invitation_code
