# app/services/reports.py
"""
Downloadable CSV reports.

Each builder takes plain collections and returns a list of dicts whose keys
become the CSV header. `REPORTS` lists what the reports screen offers.
"""

from collections import namedtuple
from datetime import date

from asset_compass.app.models import AssetStatus
from asset_compass.app.services.locations import members_of, utilization_rate
from asset_compass.app.services.store import (load_assets, load_assignments, load_employees,
                                              load_locations)

Report = namedtuple('Report', 'slug name description category filename builder')


def _day(value):
    if value is None:
        return None
    return value.date() if hasattr(value, 'date') else value


def _money(value):
    return float(value) if value is not None else 0.0


def age_category(years):
    if years > 5:
        return 'Old (5+ years)'
    if years > 3:
        return 'Mature (3-5 years)'
    if years > 1:
        return 'Moderate (1-3 years)'
    return 'New (0-1 years)'


def depreciated_value(cost, years):
    """20% straight-line per year, never below 10% of the cost."""
    return round(_money(cost) * max(0.1, 1 - years * 0.2), 2)


def warranty_urgency(days):
    if days < 0:
        return 'Expired'
    if days <= 30:
        return 'Expiring Within 30 Days'
    if days <= 60:
        return 'Expiring Within 60 Days'
    if days <= 90:
        return 'Expiring Within 90 Days'
    return 'Not Expiring Soon'


def utilization_status(status):
    if status == AssetStatus.ASSIGNED.value:
        return 'In Use'
    if status == AssetStatus.AVAILABLE.value:
        return 'Idle'
    return 'Unavailable'


def inventory_report(assets):
    return [{
        'Asset Tag': a.asset_tag,
        'Serial Number': a.serial_number,
        'Name': a.name,
        'Brand': a.brand,
        'Model': a.model,
        'Category': a.category,
        'Status': a.status,
        'Condition': a.condition,
        'Location': a.location,
        'Assigned To': a.assigned_to or 'Unassigned',
        'Purchase Date': a.purchase_date,
        'Purchase Cost': _money(a.purchase_cost),
        'Vendor': a.vendor,
        'Warranty End': a.warranty_end or 'N/A',
    } for a in assets]


def assignment_report(assignments):
    return [{
        'Asset Tag': a.asset_tag,
        'Asset Name': a.asset_name,
        'Employee Name': a.employee_name,
        'Assigned Date': _day(a.assigned_date),
        'Return Date': _day(a.return_date) or 'N/A',
        'Condition': a.condition,
        'Notes': a.notes or 'N/A',
    } for a in assignments]


def aging_report(assets, today=None):
    today = today or date.today()
    rows = []
    for a in assets:
        if a.purchase_date is None:
            age_days = age_years = None
            category = 'Unknown'
            value = _money(a.purchase_cost)
        else:
            age_days = (today - a.purchase_date).days
            age_years = age_days // 365
            category = age_category(age_years)
            value = depreciated_value(a.purchase_cost, age_years)
        rows.append({
            'Asset Tag': a.asset_tag,
            'Name': a.name,
            'Category': a.category,
            'Purchase Date': a.purchase_date,
            'Age in Days': age_days,
            'Age in Years': age_years,
            'Age Category': category,
            'Original Cost': _money(a.purchase_cost),
            'Current Value': value,
            'Condition': a.condition,
            'Status': a.status,
        })
    return rows


def warranty_report(assets, today=None):
    """Assets with a warranty end date, soonest (or longest expired) first."""
    today = today or date.today()
    rows = []
    for a in assets:
        if not a.warranty_end:
            continue
        days = (a.warranty_end - today).days
        rows.append({
            'Asset Tag': a.asset_tag,
            'Name': a.name,
            'Category': a.category,
            'Warranty End': a.warranty_end,
            'Days Until Expiry': days,
            'Urgency': warranty_urgency(days),
            'Location': a.location,
            'Assigned To': a.assigned_to or 'Unassigned',
        })
    rows.sort(key=lambda row: row['Days Until Expiry'])
    return rows


def location_summary_report(locations, assets, employees):
    rows = []
    for location in locations:
        location_assets = members_of(location, assets)

        def count(status, _assets=location_assets):
            return sum(1 for a in _assets if a.status == status.value)

        rows.append({
            'Location Name': location.name,
            'Location Type': location.type,
            'Total Assets': len(location_assets),
            'Assigned Assets': count(AssetStatus.ASSIGNED),
            'Available Assets': count(AssetStatus.AVAILABLE),
            'In Repair Assets': count(AssetStatus.REPAIR),
            'Lost Assets': count(AssetStatus.LOST),
            'Retired Assets': count(AssetStatus.RETIRED),
            'Total Employees': len(members_of(location, employees)),
            'Utilization Rate': f'{utilization_rate(location_assets):.1f}%' if location_assets else '0%',
        })
    return rows


def utilization_report(assets, assignments, today=None):
    today = today or date.today()
    latest = {}
    for assignment in assignments:
        current = latest.get(assignment.asset_id)
        if current is None or assignment.assigned_date > current:
            latest[assignment.asset_id] = assignment.assigned_date

    rows = []
    for a in assets:
        last = _day(latest.get(a.id))
        rows.append({
            'Asset Tag': a.asset_tag,
            'Name': a.name,
            'Category': a.category,
            'Status': a.status,
            'Location': a.location,
            'Assigned To': a.assigned_to or 'Unassigned',
            'Utilization Status': utilization_status(a.status),
            'Last Assignment Date': last or 'Never',
            'Days Since Last Assignment': (today - last).days if last else 'N/A',
        })
    return rows


REPORTS = [
    Report('inventory', 'Inventory Report',
           'Complete overview of all assets with current status, location, and assignment details',
           'Inventory', 'inventory_report',
           lambda: inventory_report(load_assets())),
    Report('assignments', 'Assignment Report',
           'Track all asset assignments, including current assignments and history',
           'Assignments', 'assignment_report',
           lambda: assignment_report(load_assignments())),
    Report('aging', 'Aging Report',
           'Assets grouped by age, showing depreciation and replacement timelines',
           'Financial', 'aging_report',
           lambda: aging_report(load_assets())),
    Report('warranty', 'Warranty Expiration Report',
           'Assets with warranties expiring within the next 30, 60, or 90 days',
           'Maintenance', 'warranty_expiration_report',
           lambda: warranty_report(load_assets())),
    Report('locations', 'Location Summary',
           'Asset distribution across all locations with occupancy metrics',
           'Inventory', 'location_summary_report',
           lambda: location_summary_report(load_locations(), load_assets(), load_employees())),
    Report('utilization', 'Utilization Report',
           'Asset utilization rates and idle asset identification',
           'Operations', 'utilization_report',
           lambda: utilization_report(load_assets(), load_assignments())),
]


def get_report(slug):
    return next((report for report in REPORTS if report.slug == slug), None)
