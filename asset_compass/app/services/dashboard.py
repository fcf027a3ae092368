# app/services/dashboard.py
from collections import Counter

from asset_compass.app.cache import get_cache
from asset_compass.app.models import DEFAULT_CATEGORY, AssetStatus
from asset_compass.app.services.store import load_assets

CATEGORY_COLORS = [
    'hsl(162, 63%, 41%)',
    'hsl(210, 92%, 55%)',
    'hsl(38, 92%, 50%)',
    'hsl(280, 60%, 55%)',
    'hsl(0, 0%, 60%)',
    'hsl(340, 75%, 55%)',
    'hsl(14, 80%, 50%)',
    'hsl(180, 70%, 40%)',
]


def status_counts(assets):
    """Totals shown on the dashboard cards."""
    counts = Counter(asset.status for asset in assets)
    return {
        'totalAssets': len(assets),
        'assigned': counts[AssetStatus.ASSIGNED.value],
        'available': counts[AssetStatus.AVAILABLE.value],
        'inRepair': counts[AssetStatus.REPAIR.value],
        'lost': counts[AssetStatus.LOST.value],
        'retired': counts[AssetStatus.RETIRED.value],
    }


def normalize_category(category):
    """"laptop", "LAPTOP" and "Laptop" all become "Laptop"."""
    category = (category or '').strip() or DEFAULT_CATEGORY
    return category[:1].upper() + category[1:].lower()


def category_breakdown(assets):
    counts = Counter(normalize_category(asset.category) for asset in assets)
    # Counter keeps first-seen order, sorted() is stable for ties
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        {'name': name, 'value': value, 'color': CATEGORY_COLORS[index % len(CATEGORY_COLORS)]}
        for index, (name, value) in enumerate(ranked)
    ]


def get_dashboard_stats():
    return get_cache().get('dashboard', lambda: status_counts(load_assets()))
