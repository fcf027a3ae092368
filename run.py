import os

from waitress import serve

from asset_compass.app import create_app

app = create_app()

serve(app, host=os.environ.get('HOST', '0.0.0.0'), port=int(os.environ.get('PORT', 5000)))
