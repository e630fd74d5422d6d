"""
Integration tests for the API.
"""
import json

from trainerhub import create_app


def test_health_endpoint():
    """Test the health endpoint returns a 200 response."""
    app = create_app('testing')
    with app.test_client() as client:
        response = client.get('/health')
        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'healthy'
        assert data['environment'] == 'testing'
        assert data['database_connected'] is True


def test_api_docs_endpoint():
    """Test the API docs endpoint returns a 200 response."""
    app = create_app('testing')
    with app.test_client() as client:
        response = client.get('/api/docs')
        assert response.status_code == 200
        assert b'Swagger' in response.data


def test_swagger_lists_namespaces(client):
    response = client.get('/swagger.json')
    assert response.status_code == 200
    paths = json.loads(response.data)['paths']
    assert '/api/plans/' in paths
    assert '/api/subscriptions/trainers/{trainer_id}/assign' in paths


def test_missing_token_is_rejected(client, pro_plan):
    response = client.get('/api/plans/')
    assert response.status_code == 401


def test_token_without_admin_claim_is_forbidden(client, trainer):
    from flask_jwt_extended import create_access_token

    token = create_access_token(identity=str(trainer.id))
    response = client.get('/api/plans/', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 403
    data = json.loads(response.data)
    assert data['success'] is False
    assert data['error']['kind'] == 'Unauthorized'


def test_stale_admin_claim_is_rechecked(client, db, admin_user, trainer, pro_plan):
    """Test a token claiming admin rights fails once the role is gone."""
    from flask_jwt_extended import create_access_token

    token = create_access_token(identity=str(trainer.id), additional_claims={'is_admin': True})
    response = client.post(
        f'/api/subscriptions/trainers/{trainer.id}/assign',
        json={'plan_id': pro_plan.id, 'period': 'monthly'},
        headers={'Authorization': f'Bearer {token}'},
    )

    assert response.status_code == 403
    assert json.loads(response.data)['error']['category'] == 'authorization'
