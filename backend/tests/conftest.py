"""
Pytest configuration and fixtures
"""
import json
import os
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

# Set test environment
os.environ['FLASK_ENV'] = 'testing'


@pytest.fixture
def mock_firebase_user():
    """Mock Firebase user"""
    return {
        'uid': 'test-user-id',
        'email': 'test@example.com',
        'name': 'Test User'
    }


@pytest.fixture
def mock_db():
    """Mock Firestore database"""
    return MagicMock()


@pytest.fixture
def app():
    """Create Flask app for testing"""
    from careercard import create_app
    app = create_app({'TESTING': True, 'RATELIMIT_ENABLED': False})
    return app


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def mock_verify_token(mock_firebase_user):
    """Patch Firebase token verification to accept any token as mock_firebase_user"""
    with patch('careercard.extensions.verify_id_token', return_value=mock_firebase_user) as mock_verify:
        yield mock_verify


@pytest.fixture
def auth_headers(mock_verify_token):
    """Authorization header for an authenticated request"""
    return {'Authorization': 'Bearer test-token'}


@pytest.fixture
def make_completion():
    """Factory for chat completions shaped like the OpenAI SDK's objects"""
    def _make(arguments=None, content=None, tool_name='tool'):
        tool_calls = None
        if arguments is not None:
            if not isinstance(arguments, str):
                arguments = json.dumps(arguments)
            tool_calls = [SimpleNamespace(
                id='call_1',
                type='function',
                function=SimpleNamespace(name=tool_name, arguments=arguments),
            )]
        message = SimpleNamespace(role='assistant', content=content, tool_calls=tool_calls)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])
    return _make


@pytest.fixture
def sample_card():
    """A small but complete career card"""
    return {
        "profile": {
            "name": "Jane Doe",
            "title": "Backend Engineer",
            "location": "Berlin, Germany",
            "imageUrl": "",
            "portfolioUrl": "https://janedoe.dev",
            "bio": "Builds APIs."
        },
        "experience": [
            {"id": "e1", "title": "Engineer", "company": "Acme", "period": "2020 - 2023",
             "description": "Built the billing service."}
        ],
        "projects": [
            {"id": "p1", "name": "Ledger", "description": "Double-entry ledger",
             "technologies": "Python, Postgres", "url": "https://github.com/jane/ledger"}
        ],
        "certifications": [],
        "greatestImpacts": [],
        "stylesOfWork": [
            {"id": "s1", "question": "How do you work?", "selectedAnswer": "Async first"}
        ],
        "frameworks": [
            {"id": "f1", "name": "Flask", "proficiency": "Advanced", "projectsBuilt": "5"}
        ],
        "pastimes": [],
        "codeShowcase": []
    }
