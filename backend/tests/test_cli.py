"""
CLI tests: Flask maintenance commands and the headless client renderer.
"""

from click.testing import CliRunner

from trainhub.client import __main__ as client_cli
from trainhub.extensions import db
from trainhub.models import Training, User

from conftest import BASE_URL, create_training, signup


class TestMaintenanceCommands:
    def test_init_db(self, app):
        result = app.test_cli_runner().invoke(args=['system', 'init-db'])
        assert result.exit_code == 0
        assert 'Database tables created' in result.output

    def test_reset_db_needs_confirmation(self, app, client, alice):
        runner = app.test_cli_runner()
        result = runner.invoke(args=['system', 'reset-db'], input='n\n')
        assert result.exit_code == 1
        assert db.session.query(User).count() == 1

        result = runner.invoke(args=['system', 'reset-db', '--yes'])
        assert result.exit_code == 0
        assert db.session.query(User).count() == 0

    def test_users_create_and_list(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=[
            'users', 'create', '--name', 'Dana Cruz', '--email', 'Dana@Example.com', '--password', 'secret123',
        ])
        assert result.exit_code == 0
        assert 'Created user: Dana Cruz (dana@example.com)' in result.output

        result = runner.invoke(args=['users', 'list'])
        assert 'dana@example.com' in result.output

    def test_users_create_rejects_duplicate(self, app, client, alice):
        result = app.test_cli_runner().invoke(args=[
            'users', 'create', '--name', 'Alice Again', '--email', alice.email, '--password', 'secret123',
        ])
        assert result.exit_code == 1
        assert 'FAIL account already exists' in result.output

    def test_trainings_list_and_purge(self, app, client, alice):
        kept = create_training(client, alice.email, title='Keep Me')
        binned = create_training(client, alice.email, title='Bin Me')
        client.post('/api/training/delete', json={'id': binned['id'], 'email': alice.email})

        runner = app.test_cli_runner()
        active = runner.invoke(args=['trainings', 'list'])
        assert 'Keep Me' in active.output and 'Bin Me' not in active.output
        deleted = runner.invoke(args=['trainings', 'list', '--deleted'])
        assert 'Bin Me' in deleted.output

        result = runner.invoke(args=['trainings', 'purge', '--email', alice.email, '--yes'])
        assert 'Purged 1 training(s)' in result.output
        assert [t.id for t in db.session.query(Training).all()] == [kept['id']]


class TestClientRender:
    def _runner(self, monkeypatch, http_transport):
        real = client_cli.TrainHubApp
        monkeypatch.setattr(
            client_cli, 'TrainHubApp',
            lambda config, **kwargs: real(config, http_transport=http_transport, **kwargs),
        )
        monkeypatch.setenv('TRAINHUB_API_BASE', BASE_URL)
        return CliRunner()

    def test_render_signed_in_page(self, monkeypatch, client, http_transport):
        principal = signup(client)
        client.post('/api/user', json={'email': principal.email, 'inventory': [
            {'id': 'a', 'description': 'Ladder', 'quantity': 1, 'target_quantity': 2},
        ]})

        result = self._runner(monkeypatch, http_transport).invoke(client_cli.cli, [
            'render', '/inventory', '--user-name', principal.name, '--user-email', principal.email,
        ])
        assert result.exit_code == 0, result.output
        assert 'Ladder' in result.output
        assert 'Need: +1' in result.output

    def test_render_error_exit_code(self, monkeypatch, client, http_transport):
        principal = signup(client)
        result = self._runner(monkeypatch, http_transport).invoke(client_cli.cli, [
            'render', '/training/view?id=missing', '--user-email', principal.email,
        ])
        assert result.exit_code == 1
        assert 'training not found' in result.output
