"""
Tests for the strength/context resolver.

Unknown teams and venues must fall back to neutral defaults, never raise.
"""

import pytest

from t20_predictor.data.reference import ReferenceData, Venue, Player
from t20_predictor.features.team_context import (
    StrengthResolver, TeamContext, venue_impact,
    BATTING_FRIENDLY, BOWLING_FRIENDLY, NEUTRAL,
)
from t20_predictor.features.toss import simulate_toss
from t20_predictor.models.engine_config import EngineConfig


class TestStrength:

    def test_known_team(self, fixture_reference):
        resolver = StrengthResolver(fixture_reference)
        assert resolver.get_strength('Strong') == 9.2

    def test_unknown_team_uses_default(self, fixture_reference):
        resolver = StrengthResolver(fixture_reference)
        assert resolver.get_strength('Atlantis') == 7.0


class TestFormMultiplier:

    def test_no_players_is_exactly_one(self, squad_reference):
        resolver = StrengthResolver(squad_reference)
        assert resolver.get_form_multiplier('Unformed') == 1.0

    def test_average_form_rescaled(self, squad_reference):
        resolver = StrengthResolver(squad_reference)
        # avg form 0.7 -> 0.95 + 0.07
        assert resolver.get_form_multiplier('Formed') == pytest.approx(1.02)

    def test_default_roster(self):
        resolver = StrengthResolver(ReferenceData(), EngineConfig())
        # Kohli 0.92, Bumrah 0.98
        assert resolver.get_form_multiplier('India') == pytest.approx(0.95 + 0.095)

    def test_band_follows_config(self, squad_reference):
        resolver = StrengthResolver(squad_reference, EngineConfig(form_floor=0.9, form_span=0.2))
        assert resolver.get_form_multiplier('Formed') == pytest.approx(0.9 + 0.14)

    def test_rate_statistics_do_not_move_form(self):
        quiet = Player('q1', 'Quiet', 'Side', form_index=0.5)
        loud = Player('l1', 'Loud', 'Side', expected_runs_per_ball=2.5,
                      expected_wickets_per_ball=0.2, form_index=0.5)
        base = {'team_strengths': {'Side': 8.0}}

        quiet_form = StrengthResolver(ReferenceData(players=[quiet], **base)).get_form_multiplier('Side')
        loud_form = StrengthResolver(ReferenceData(players=[loud], **base)).get_form_multiplier('Side')
        assert quiet_form == loud_form == pytest.approx(1.0)


class TestVenueModifier:

    def test_match_by_name(self, fixture_reference):
        resolver = StrengthResolver(fixture_reference)
        assert resolver.find_venue_modifier('Flat Deck Oval') == 1.1

    def test_match_by_city_case_insensitive(self, fixture_reference):
        resolver = StrengthResolver(fixture_reference)
        assert resolver.find_venue_modifier('seamville') == 0.9

    def test_unknown_venue_is_neutral(self, fixture_reference):
        resolver = StrengthResolver(fixture_reference)
        assert resolver.find_venue_modifier('Lord\'s, London') == 1.0

    @pytest.mark.parametrize('venue', [None, ''])
    def test_no_venue_is_neutral(self, fixture_reference, venue):
        resolver = StrengthResolver(fixture_reference)
        assert resolver.find_venue_modifier(venue) == 1.0

    def test_first_match_wins(self):
        reference = ReferenceData(venues=[
            Venue('Harbour Oval', 'Port City', 1.08),
            Venue('Harbour Oval Nets', 'Port City', 0.92),
        ])
        resolver = StrengthResolver(reference)
        assert resolver.find_venue_modifier('Harbour Oval Nets, Port City') == 1.08

    def test_default_table_full_string(self):
        resolver = StrengthResolver(ReferenceData())
        assert resolver.find_venue_modifier('Wankhede Stadium, Mumbai') == 1.1
        assert resolver.find_venue_modifier('R. Premadasa Stadium, Colombo') == 0.9


class TestTossBias:

    def test_only_toss_winner_gets_bias(self, fixture_reference):
        resolver = StrengthResolver(fixture_reference)
        assert resolver.get_toss_bias('Strong', 'Strong') == 1.05
        assert resolver.get_toss_bias('Weak', 'Strong') == 1.0
        assert resolver.get_toss_bias('Strong', None) == 1.0


class TestResolve:

    def test_drift_is_product_of_factors(self):
        resolver = StrengthResolver(ReferenceData(), EngineConfig())
        context = resolver.resolve('India', 'Mumbai', toss_winner='India')

        assert context.won_toss
        assert context.venue_modifier == 1.1
        assert context.drift == pytest.approx(9.2 * 1.1 * 1.045 * 1.05)

    def test_unknown_everything_is_neutral(self, fixture_reference):
        context = StrengthResolver(fixture_reference).resolve('Atlantis', 'Nowhere', toss_winner='Lemuria')
        assert context == TeamContext(team='Atlantis', strength=7.0)
        assert context.drift == pytest.approx(7.0)

    def test_all_modifiers_positive(self):
        resolver = StrengthResolver(ReferenceData())
        for team in ReferenceData().teams:
            context = resolver.resolve(team, 'Kandy', toss_winner=team)
            assert context.strength > 0
            assert context.form_multiplier > 0
            assert context.venue_modifier > 0
            assert context.drift > 0


class TestVenueImpact:

    def test_labels(self):
        assert venue_impact(1.1) == BATTING_FRIENDLY
        assert venue_impact(0.9) == BOWLING_FRIENDLY
        assert venue_impact(1.0) == NEUTRAL


class TestToss:

    def test_winner_is_one_of_the_teams(self, rng):
        winner, loser = simulate_toss('A', 'B', rng)
        assert {winner, loser} == {'A', 'B'}

    def test_roughly_fair(self, rng):
        wins = sum(simulate_toss('A', 'B', rng)[0] == 'A' for _ in range(2000))
        assert 900 < wins < 1100
