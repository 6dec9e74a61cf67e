""" Run using 'panel serve ./viewer_app.py --dev' """
from mviewer.app import ViewerApp

ViewerApp().servable()
