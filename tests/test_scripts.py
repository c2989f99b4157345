"""
Smoke tests for the command-line scripts.
"""

import runpy
from pathlib import Path

import pytest

import config as project_config

SCRIPTS_DIR = Path(__file__).resolve().parent.parent / 'scripts'


@pytest.fixture(autouse=True)
def builtin_reference(monkeypatch):
    monkeypatch.setattr(project_config, 'REFERENCE_DATA_PATH', None)


def load_script(name: str) -> dict:
    return runpy.run_path(str(SCRIPTS_DIR / name), run_name=name.replace('.py', ''))


class TestPredictMatch:

    def test_from_scratch(self, capsys):
        main = load_script('predict_match.py')['main']
        result = main(['India', 'USA', '--simulations', '300', '--seed', '3'])

        out = capsys.readouterr().out
        assert result.winner == 'India'
        assert 'Predicted Winner:   India' in out
        assert 'Upset Risk' in out
        assert '\nBreakdown:\n' in out

    def test_live_state(self, capsys):
        main = load_script('predict_match.py')['main']
        result = main([
            'India', 'Pakistan', '--venue', 'Colombo', '--toss', 'Pakistan',
            '--overs', '10', '--runs', '90', '--wickets', '2',
            '--simulations', '300', '--seed', '3',
        ])

        out = capsys.readouterr().out
        assert 'Live: India 90/2 after 10.0 overs' in out
        assert result.venue_impact == 'Bowling Friendly'
        assert result.expected_total >= 90


class TestSimulateTournament:

    def test_prints_table(self, capsys):
        main = load_script('simulate_tournament.py')['main']
        result = main(['--tournaments', '50', '--h2h-simulations', '50', '--seed', '1', '--no-progress'])

        out = capsys.readouterr().out
        assert result.n_tournaments == 50
        assert 'TOURNAMENT ODDS' in out
        assert 'India' in out
