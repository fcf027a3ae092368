from flask import render_template, Blueprint, request
from flask_login import login_required

from asset_compass.app.services.dashboard import category_breakdown, get_dashboard_stats
from asset_compass.app.services.search import search as run_search
from asset_compass.app.services.store import load_alerts, load_assets, load_assignments

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/')
@login_required
def dashboard():
    assets = load_assets()
    return render_template('dashboard.html',
                           title='Dashboard',
                           stats=get_dashboard_stats(),
                           categories=category_breakdown(assets),
                           recent_assets=assets[:5],
                           recent_assignments=load_assignments()[:5],
                           alerts=load_alerts())


@dashboard_bp.route('/search')
@login_required
def search():
    query = request.args.get('q', '')
    results = run_search(query)
    if request.headers.get('HX-Request'):
        return render_template('partials/search_results.html', query=query, **results)
    return render_template('search.html', title='Search', query=query, **results)
