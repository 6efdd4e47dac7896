from django.db import models
from django.utils.text import slugify
from django.utils.translation import gettext_lazy as _


class Centre(models.Model):

    name = models.CharField(max_length=150,unique=True,help_text="Centre name (e.g. Kochi Experience Centre)")
    slug = models.SlugField(max_length=150,unique=True,help_text="URL-friendly name (auto-generated)")
    city = models.CharField(max_length=100,blank=True,help_text="City the centre is located in")
    is_active = models.BooleanField(default=True,help_text="Is this centre accepting leads?")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Centre"
        verbose_name_plural = "Centres"
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):

        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def get_active_agents_count(self):

        return self.agents.filter(is_active=True).count()


class Language(models.Model):

    name = models.CharField(max_length=100,unique=True,help_text="Language name (e.g. Malayalam)")
    code = models.SlugField(max_length=20,unique=True,help_text="Short code (e.g. ml)")
    is_active = models.BooleanField(default=True,help_text="Is this language offered?")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Language"
        verbose_name_plural = "Languages"
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):

        if not self.code:
            self.code = slugify(self.name)[:20]
        super().save(*args, **kwargs)


class LeadSource(models.Model):

    name = models.CharField(max_length=100,unique=True,help_text="Source name (e.g. Website, Facebook)")
    slug = models.SlugField(max_length=100,unique=True,help_text="URL-friendly name (auto-generated)")
    description = models.TextField(blank=True,help_text="Optional description")
    is_api_source = models.BooleanField(default=False,help_text="Leads arrive through a webhook integration")
    is_active = models.BooleanField(default=True,help_text="Is this source active?")
    order = models.PositiveIntegerField(default=0,help_text="Display order (lower numbers appear first)")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Lead Source"
        verbose_name_plural = "Lead Sources"
        ordering = ['order', 'name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):

        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class Status(models.Model):
    """
    Typed status record shared by three taxonomies.

    Code never compares Status rows across types: lead statuses, lead
    substatuses and account states each have their own slug constants below.
    The table stays polymorphic so admin screens and reports can resolve any
    slug to a display name.
    """

    TYPE_ACCOUNT = 'account_status'
    TYPE_LEAD = 'lead_status'
    TYPE_LEAD_SUB = 'lead_substatus'
    TYPE_CHOICES = [
        (TYPE_ACCOUNT, _('Account Status')),
        (TYPE_LEAD, _('Lead Status')),
        (TYPE_LEAD_SUB, _('Lead Substatus')),
    ]

    # Lead pipeline (TYPE_LEAD)
    LEAD = 'lead'
    QUALIFIED = 'qualified'
    WON = 'won'
    LOST = 'lost'
    LEAD_SLUGS = (LEAD, QUALIFIED, WON, LOST)
    TERMINAL_SLUGS = (WON, LOST)

    # Lead substatus (TYPE_LEAD_SUB)
    HOT = 'hot'
    WARM = 'warm'
    CIF = 'cif'
    SUBSTATUS_SLUGS = (HOT, WARM, CIF)

    # Account (TYPE_ACCOUNT)
    ACTIVE = 'active'
    INACTIVE = 'inactive'

    type = models.CharField(max_length=20,choices=TYPE_CHOICES,db_index=True,help_text="Which taxonomy this status belongs to")
    name = models.CharField(max_length=100,help_text="Display name (e.g. Qualified)")
    slug = models.SlugField(max_length=100,help_text="Stable identifier used by the workflow engine")
    description = models.TextField(blank=True)
    order = models.PositiveIntegerField(default=0,help_text="Display order inside its taxonomy")
    is_active = models.BooleanField(default=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Status"
        verbose_name_plural = "Statuses"
        ordering = ['type', 'order', 'name']
        unique_together = ['type', 'slug']

    def __str__(self):
        return f"{self.name} ({self.get_type_display()})"

    def is_terminal(self):
        return self.type == self.TYPE_LEAD and self.slug in self.TERMINAL_SLUGS
