"""
Reference data every deployment needs before the workflow engine can run.

Used by the 0002 data migration (with historical models) and by the
``seed_workflow`` management command (with the live models), so both paths
upsert the same rows.
"""

STATUS_SEEDS = [
    # type, slug, name, order, description
    ('lead_status', 'lead', 'Lead', 1, 'New lead owned by pre-sales'),
    ('lead_status', 'qualified', 'Qualified', 2, 'Qualified and handed over to sales'),
    ('lead_status', 'won', 'Won', 3, 'Lead converted successfully'),
    ('lead_status', 'lost', 'Lost', 4, 'Lead marked as lost'),
    ('lead_substatus', 'hot', 'Hot', 1, 'Freshly qualified'),
    ('lead_substatus', 'warm', 'Warm', 2, 'Follow-up, site visit or meeting pending'),
    ('lead_substatus', 'cif', 'CIF', 3, 'Customer information form collected'),
    ('account_status', 'active', 'Active', 1, 'Agent can receive leads'),
    ('account_status', 'inactive', 'Inactive', 2, 'Agent is excluded from assignment'),
]

SOURCE_SEEDS = [
    # name, slug, is_api_source, order
    ('Website', 'website', False, 1),
    ('Facebook', 'facebook', True, 2),
    ('Google Ads', 'google-ads', True, 3),
    ('LinkedIn', 'linkedin', True, 4),
    ('Referral', 'referral', False, 5),
]


def seed_reference_data(status_model, source_model):
    """
    Upsert statuses and lead sources.

    Returns:
        tuple: (statuses created, sources created)
    """
    statuses_created = 0
    for status_type, slug, name, order, description in STATUS_SEEDS:
        _, created = status_model.objects.update_or_create(
            type=status_type,
            slug=slug,
            defaults={'name': name, 'order': order, 'description': description},
        )
        statuses_created += int(created)

    sources_created = 0
    for name, slug, is_api_source, order in SOURCE_SEEDS:
        _, created = source_model.objects.update_or_create(
            slug=slug,
            defaults={'name': name, 'is_api_source': is_api_source, 'order': order},
        )
        sources_created += int(created)

    return statuses_created, sources_created
