from asset_compass.app.models import User
from asset_compass.app import db

from conftest import create_user, login_user


def test_register(client, app):
    response = client.get('/register')
    assert response.status_code == 200

    response = client.post('/register', data={
        'username': 'testuser',
        'email': 'Test@Example.com',
        'password': 'password',
        'confirm_password': 'password'
    }, follow_redirects=True)
    assert response.status_code == 200
    assert b'Your account has been created!' in response.data

    with app.app_context():
        user = User.query.filter_by(email='test@example.com').first()
        assert user is not None
        assert user.username == 'testuser'
        # First account administers the installation
        assert user.role == 'ADMIN'


def test_second_registration_is_not_admin(client, app):
    create_user(app, 'first', 'first@example.com')
    client.post('/register', data={
        'username': 'second',
        'email': 'second@example.com',
        'password': 'password',
        'confirm_password': 'password'
    })
    with app.app_context():
        assert User.query.filter_by(username='second').one().role == 'SUPPORT'


def test_register_rejects_mismatched_passwords(client):
    response = client.post('/register', data={
        'username': 'testuser',
        'email': 'test@example.com',
        'password': 'password',
        'confirm_password': 'different'
    })
    assert b'Your account has been created!' not in response.data


def test_login_logout(client, app):
    create_user(app, 'testuser', 'test@example.com')

    response = login_user(client, 'test@example.com')
    assert response.status_code == 200
    assert b'Logout' in response.data

    response = client.get('/logout', follow_redirects=True)
    assert response.status_code == 200
    assert b'Login' in response.data


def test_login_with_wrong_password(client, app):
    create_user(app, 'testuser', 'test@example.com')
    response = login_user(client, 'test@example.com', password='wrong')
    assert b'Login Unsuccessful' in response.data


def test_profile_update_and_password_change(user_client, app):
    response = user_client.get('/profile')
    assert response.status_code == 200
    assert b'support' in response.data

    response = user_client.post('/profile', data={
        'old_password': 'password',
        'new_password': 'newpassword',
        'confirm_password': 'newpassword',
        'password_submit': 'Change Password',
    }, follow_redirects=True)
    assert b'Your password has been updated!' in response.data

    with app.app_context():
        assert db.session.query(User).filter_by(username='support').one().check_password('newpassword')


def test_settings_requires_admin(user_client):
    response = user_client.get('/settings/', follow_redirects=True)
    assert b'You do not have permission to perform this action.' in response.data


def test_admin_can_save_settings(admin_client, app):
    response = admin_client.get('/settings/')
    assert response.status_code == 200
    assert b'Settings' in response.data

    response = admin_client.post('/settings/', data={
        'org_name': 'Acme',
        'tag_prefix': 'acm-',
        'currency': 'usd',
        'timezone': 'UTC',
        'categories': 'Laptops\nPhones\n',
        'assignment_notifications': 'y',
    }, follow_redirects=True)
    assert b'Settings saved.' in response.data

    settings = admin_client.get('/api/settings').get_json()
    assert settings['orgName'] == 'Acme'
    assert settings['tagPrefix'] == 'ACM-'
    assert settings['currency'] == 'USD'
    assert settings['categories'] == ['Laptops', 'Phones']
    assert settings['notifications']['assignmentNotifications'] is True
    assert settings['notifications']['warrantyAlerts'] is False
