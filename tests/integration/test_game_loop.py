"""Integration test: seed, play scenarios, simulate days, persist, reflect."""

import random
from pathlib import Path
from textwrap import dedent

import pytest

from careersim.core.config import Settings
from careersim.core.db import init_db, load_session, save_session
from careersim.core.schemas import PERCENT_FIELDS
from careersim.pipeline.orchestrator import (
    advance_day,
    create_session,
    get_mirror,
    next_scenario,
    resolve_catalog,
    submit_action,
    take_offer,
)
from careersim.profile.schema import TRACKS, PlayerProfile, SelfRatings
from main import main


def _profile(track: str = "engineer") -> PlayerProfile:
    return PlayerProfile(
        track=track,
        background="career_switcher",
        financial_situation="moderate",
        self_ratings=SelfRatings(python=4, sql=3, communication=4, confidence=3),
    )


def _play(session_track: str, seed: int, days: int = 120) -> tuple[object, ...]:
    rng = random.Random(seed)
    session = create_session(_profile(session_track))
    catalog = resolve_catalog()
    for _ in range(days):
        advance_day(session, rng)
        if session.progress.ending is not None:
            break
        scenario = next_scenario(session, catalog, rng=rng)
        choice = rng.choice(scenario.choices)
        submit_action(session, catalog, scenario.id, choice.id)
        if session.progress.ending is not None:
            break
    return session.stats, session.progress, session.selector, tuple(session.decisions)


class TestGameLoop:
    @pytest.mark.parametrize("track", TRACKS)
    def test_invariants_hold_through_play(self, track: str) -> None:
        rng = random.Random(11)
        session = create_session(_profile(track))
        catalog = resolve_catalog()
        for _ in range(200):
            advance_day(session, rng)
            if session.progress.ending is not None:
                break
            scenario = next_scenario(session, catalog, rng=rng)
            assert scenario.applies_to_track(track)
            assert scenario.applies_to_phase(session.progress.phase.state)
            submit_action(session, catalog, scenario.id, rng.choice(scenario.choices).id)

            for name in PERCENT_FIELDS:
                assert 0 <= getattr(session.stats, name) <= 100
            assert len(session.selector.scenario_history) <= 100
            if session.progress.ending is not None:
                break

    def test_same_seed_same_run(self) -> None:
        assert _play("analyst", 5) == _play("analyst", 5)

    def test_ending_is_final(self) -> None:
        session = create_session(_profile())
        session.stats.savings = 10
        advance_day(session, random.Random(0))
        ending = session.progress.ending
        assert ending is not None
        for _ in range(5):
            advance_day(session, random.Random(0))
        assert session.progress.ending == ending
        assert session.progress.days_in_search == 1


class TestPersistence:
    def test_resume_from_store(self, tmp_path: Path) -> None:
        rng = random.Random(2)
        session = create_session(_profile())
        catalog = resolve_catalog()
        for _ in range(10):
            advance_day(session, rng)
            if session.progress.ending is not None:
                break
            scenario = next_scenario(session, catalog, rng=rng)
            submit_action(session, catalog, scenario.id, scenario.choices[0].id)

        conn = init_db(tmp_path / "sessions.db")
        save_session(conn, session)
        restored = load_session(conn, session.session_id)
        conn.close()

        assert restored is not None
        assert restored.stats == session.stats
        assert restored.progress == session.progress
        assert restored.selector == session.selector
        assert get_mirror(restored) == get_mirror(session)

        # Both copies continue identically from the same random state.
        rng_a, rng_b = random.Random(99), random.Random(99)
        advance_day(session, rng_a)
        advance_day(restored, rng_b)
        assert restored.progress == session.progress

    def test_offer_path(self, tmp_path: Path) -> None:
        session = create_session(_profile())
        session.progress.phase = session.progress.phase.model_copy(update={"state": "offer_stage"})
        take_offer(session, 120_000, "Platform Engineer", "Initech")

        conn = init_db(tmp_path / "sessions.db")
        save_session(conn, session)
        restored = load_session(conn, session.session_id)
        conn.close()

        assert restored is not None
        assert restored.progress.ending is not None
        assert restored.progress.ending.type == "offer_accepted"
        assert get_mirror(restored).final_state == "accepted"


class TestCli:
    def _write_inputs(self, tmp_path: Path) -> tuple[Path, Path]:
        profile = tmp_path / "profile.yaml"
        _profile("analyst").to_yaml(profile)
        settings = tmp_path / "settings.yaml"
        settings.write_text(dedent(f"""\
            simulation:
              max_days: 30
            database:
              path: {tmp_path / "sessions.db"}
        """))
        return profile, settings

    def test_seed(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        profile, _ = self._write_inputs(tmp_path)
        main(["seed", "--profile", str(profile)])
        out = capsys.readouterr().out
        assert "Track: analyst" in out
        assert "SEEDED STATS" in out

    def test_simulate_and_save(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        profile, settings = self._write_inputs(tmp_path)
        main([
            "simulate", "--profile", str(profile), "--config", str(settings),
            "--seed", "4", "--save",
        ])
        out = capsys.readouterr().out
        assert "CAREER MIRROR" in out
        assert "Session saved" in out
        assert (tmp_path / "sessions.db").exists()

    def test_validate_packaged_catalog(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["validate-catalog"])
        assert "Catalog OK" in capsys.readouterr().out

    def test_validate_catalog_with_gap(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text(dedent("""\
            scenarios:
              - id: only_searching
                title: Only
                text: Searching only.
                phase: searching
                tracks: all
                difficulty: 1
                choices:
                  - id: ok
                    text: OK
        """))
        with pytest.raises(SystemExit) as excinfo:
            main(["validate-catalog", "--catalog", str(path)])
        assert excinfo.value.code == 1

    def test_missing_profile_exits(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main(["seed", "--profile", str(tmp_path / "missing.yaml")])
        assert excinfo.value.code == 1
        assert "Error:" in capsys.readouterr().err


def test_settings_catalog_path(tmp_path: Path) -> None:
    path = tmp_path / "catalog.yaml"
    path.write_text(dedent("""\
        scenarios:
          - id: generic
            title: Generic
            text: Anything.
            phase: any
            tracks: all
            difficulty: 1
            choices:
              - id: ok
                text: OK
    """))
    settings = Settings.model_validate({"catalog": {"path": str(path)}})
    catalog = resolve_catalog(settings)
    session = create_session(_profile(), settings)
    assert next_scenario(session, catalog, roll=0.5).id == "generic"
