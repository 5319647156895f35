"""
Development server - runs the backend app from the repo root
"""
import os
import sys

root_dir = os.path.dirname(os.path.abspath(__file__))
backend_path = os.path.join(root_dir, 'backend')
if backend_path not in sys.path:
    sys.path.insert(0, backend_path)

from careercard import create_app  # noqa: E402

app = create_app()

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5001))
    app.run(host='0.0.0.0', port=port, debug=os.environ.get('FLASK_ENV') == 'development')
