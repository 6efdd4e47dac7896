# Models:
# 1. User - Custom user model (agents, managers and admins)


from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from django.db import models
from django.utils import timezone
from django.core.validators import RegexValidator
from django.utils.translation import gettext_lazy as _



# USER MANAGER (handles user creation)
class UserManager(BaseUserManager):
    """
    Custom user manager for User model

    Provides methods to:
    - Create regular users (agents)
    - Create superusers (admins)
    - Handle email-based authentication
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a regular user

        Args:
            email (str): User's email address (required)
            password (str): User's password (required)
            **extra_fields: Additional fields (first_name, role, centre, languages, etc.)

        Returns:
            User: The created user object

        Raises:
            ValueError: If email is not provided

        Example:
            user = User.objects.create_user(
                email='agent@homes.in',
                password='securepass123',
                first_name='Anu',
                role=User.ROLE_PRESALES_AGENT,
                centre=kochi,
                languages=[malayalam, english],
            )
        """
        if not email:
            raise ValueError(_('Users must have an email address'))

        # Normalize email (convert domain to lowercase)
        email = self.normalize_email(email)

        # Many-to-many values can only be attached once the row exists
        languages = extra_fields.pop('languages', None)

        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)

        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)

        if languages:
            user.languages.set(languages)

        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create and save a superuser (admin)

        Superusers have all permissions and can access admin panel
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', User.ROLE_ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True'))

        return self.create_user(email, password, **extra_fields)



# USER MODEL
class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model

    Features:
    - Email-based authentication (no username)
    - Role decides the team (pre-sales or sales) an agent belongs to
    - Centre, languages and qualification tier drive lead assignment
    - last_assigned_at is the round-robin cursor, written only by
      apps.accounts.directory.touch_assignment()
    """

    # ROLES
    ROLE_ADMIN = 'admin'
    ROLE_PRESALES_AGENT = 'presales_agent'
    ROLE_PRESALES_MANAGER = 'presales_manager'
    ROLE_SALES_AGENT = 'sales_agent'
    ROLE_SALES_MANAGER = 'sales_manager'
    ROLE_CHOICES = [
        (ROLE_ADMIN, _('Administrator')),
        (ROLE_PRESALES_AGENT, _('Pre-Sales Executive')),
        (ROLE_PRESALES_MANAGER, _('Pre-Sales Manager')),
        (ROLE_SALES_AGENT, _('Sales Executive')),
        (ROLE_SALES_MANAGER, _('Sales Manager')),
    ]

    # TEAMS (derived from role, never stored)
    TEAM_PRESALES = 'presales'
    TEAM_SALES = 'sales'
    TEAM_CHOICES = [
        (TEAM_PRESALES, _('Pre-Sales')),
        (TEAM_SALES, _('Sales')),
    ]
    TEAM_ROLES = {
        TEAM_PRESALES: [ROLE_PRESALES_AGENT, ROLE_PRESALES_MANAGER],
        TEAM_SALES: [ROLE_SALES_AGENT, ROLE_SALES_MANAGER],
    }

    # QUALIFICATION TIERS (which value of lead a sales agent handles)
    QUALIFICATION_HIGH_VALUE = 'high_value'
    QUALIFICATION_LOW_VALUE = 'low_value'
    QUALIFICATION_CHOICES = [
        (QUALIFICATION_HIGH_VALUE, _('High Value')),
        (QUALIFICATION_LOW_VALUE, _('Low Value')),
    ]

    email = models.EmailField(_('email address'),unique=True,max_length=255,db_index=True,help_text=_('Required. Used for login.'))
    first_name = models.CharField(_('first name'),max_length=50,blank=True)
    last_name = models.CharField(_('last name'),max_length=50,blank=True)

    # Phone validator (accepts: +919876543210, 09876543210, etc.)
    phone_validator = RegexValidator(regex=r'^\+?1?\d{9,15}$',message=_('Phone number must be entered in the format: +999999999. Up to 15 digits allowed.'))
    phone = models.CharField(_('phone number'),validators=[phone_validator],max_length=17,blank=True,null=True)

    # ROLE & ASSIGNMENT ATTRIBUTES
    role = models.CharField(_('role'),max_length=20,choices=ROLE_CHOICES,default=ROLE_PRESALES_AGENT,db_index=True,help_text=_('Role decides which team receives this user in round-robin'))
    centre = models.ForeignKey('core.Centre',on_delete=models.SET_NULL,related_name='agents',null=True,blank=True,verbose_name=_('centre'),help_text=_('Centre this agent works from'))
    languages = models.ManyToManyField('core.Language',related_name='agents',blank=True,verbose_name=_('languages'),help_text=_('Languages this agent is comfortable speaking'))
    qualification = models.CharField(_('qualification'),max_length=20,choices=QUALIFICATION_CHOICES,blank=True,help_text=_('Lead value tier handled by this agent (sales team)'))
    last_assigned_at = models.DateTimeField(_('last assigned at'),null=True,blank=True,db_index=True,help_text=_('Round-robin cursor: when this agent last received a lead'))

    total_leads_assigned = models.PositiveIntegerField(_('total leads assigned'), default=0,help_text=_('Total number of leads assigned to this user'))
    is_active = models.BooleanField(_('active'), default=True, help_text=_('Inactive agents never receive leads. Unselect this instead of deleting accounts.'))
    is_staff = models.BooleanField(_('staff status'), default=False,help_text=_('Designates whether the user can log into admin site.'))
    date_joined = models.DateTimeField(_('date joined'), default=timezone.now)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    # MANAGER & SETTINGS
    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name']

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['-date_joined']
        indexes = [
            models.Index(fields=['role', 'is_active', 'last_assigned_at'], name='user_role_active_cursor_idx'),
            models.Index(fields=['centre', 'role'], name='user_centre_role_idx'),
        ]

    def __str__(self):
        """
        Example:
            "Anu Joseph (anu@homes.in)"
        """
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name} ({self.email})"
        return self.email

    # HELPER METHODS
    def get_full_name(self):
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        elif self.first_name:
            return self.first_name
        return self.email

    def get_short_name(self):

        return self.first_name if self.first_name else self.email

    # ROLE CHECKS
    @property
    def team(self):
        """Team this user is rotated in, or None for admins"""
        for team, roles in self.TEAM_ROLES.items():
            if self.role in roles:
                return team
        return None

    def is_admin(self):

        return self.role == self.ROLE_ADMIN or self.is_superuser

    def is_presales(self):

        return self.team == self.TEAM_PRESALES

    def is_sales(self):

        return self.team == self.TEAM_SALES
