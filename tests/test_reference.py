"""
Tests for the reference tables and their JSON loader.
"""

import json

import pytest

import config as project_config
from t20_predictor.data.reference import (
    ReferenceData, Venue, Player, get_reference_data, DEFAULT_STRENGTH
)


class TestDefaults:
    """Built-in tables"""

    def test_known_strengths(self):
        reference = ReferenceData()
        assert reference.team_strengths['India'] == 9.2
        assert reference.team_strengths['USA'] == 6.0
        assert reference.default_strength == DEFAULT_STRENGTH

    def test_teams_strongest_first(self):
        teams = ReferenceData().teams
        assert teams[0] == 'India'
        assert teams[-1] == 'USA'
        assert len(teams) == 12

    def test_players_for_team(self):
        reference = ReferenceData()
        assert {p.name for p in reference.players_for('India')} == {'Virat Kohli', 'Jasprit Bumrah'}
        assert reference.players_for('Netherlands') == []

    def test_instances_do_not_share_tables(self):
        a = ReferenceData()
        a.team_strengths['Nepal'] = 6.2
        assert 'Nepal' not in ReferenceData().team_strengths


class TestValidation:
    """Modifiers must be strictly positive"""

    def test_non_positive_venue_modifier(self):
        with pytest.raises(ValueError):
            Venue('Nowhere', 'Nowhere', 0.0)

    def test_form_index_out_of_range(self):
        with pytest.raises(ValueError):
            Player('x', 'X', 'India', 'Batter', 1.0, 0.0, 1.5)

    def test_unknown_role(self):
        with pytest.raises(ValueError):
            Player('x', 'X', 'India', 'Wicketkeeper', 1.0, 0.0, 0.5)

    def test_non_positive_strength(self):
        with pytest.raises(ValueError):
            ReferenceData(team_strengths={'Broken': -1.0})


class TestVenueMatching:

    def test_matches_name_or_city_case_insensitive(self):
        venue = Venue('Wankhede Stadium', 'Mumbai', 1.1)
        assert venue.matches('WANKHEDE STADIUM')
        assert venue.matches('a night game in mumbai')
        assert not venue.matches('Eden Gardens, Kolkata')


class TestPersistence:
    """JSON save/load"""

    def test_save_and_load(self, tmp_path, fixture_reference):
        path = tmp_path / 'nested' / 'reference.json'
        fixture_reference.save(path)

        loaded = ReferenceData.load(path)
        assert loaded.team_strengths == fixture_reference.team_strengths
        assert loaded.venues == fixture_reference.venues
        assert loaded.default_strength == fixture_reference.default_strength

    def test_load_minimal_file(self, tmp_path):
        path = tmp_path / 'reference.json'
        path.write_text(json.dumps({'team_strengths': {'Nepal': 6.4}}))

        loaded = ReferenceData.load(path)
        assert loaded.team_strengths == {'Nepal': 6.4}
        assert loaded.venues == []
        assert loaded.players == []
        assert loaded.default_strength == DEFAULT_STRENGTH

    def test_missing_section_raises(self, tmp_path):
        path = tmp_path / 'reference.json'
        path.write_text(json.dumps({'venues': []}))
        with pytest.raises(KeyError):
            ReferenceData.load(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ReferenceData.load(tmp_path / 'absent.json')


class TestGetReferenceData:

    def test_defaults_when_unconfigured(self, monkeypatch):
        monkeypatch.setattr(project_config, 'REFERENCE_DATA_PATH', None)
        assert get_reference_data().team_strengths == ReferenceData().team_strengths

    def test_configured_path(self, monkeypatch, tmp_path, fixture_reference):
        path = tmp_path / 'reference.json'
        fixture_reference.save(path)
        monkeypatch.setattr(project_config, 'REFERENCE_DATA_PATH', str(path))
        assert 'Strong' in get_reference_data().team_strengths
