# Copyright (c) Syntropy Systems
"""Tests for loading and processing ensembles."""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path

import pytest

import paramstudy
from paramstudy import Ensemble, EnsembleType, Input, KeyNotFound
from paramstudy.errors import InvalidCount, InvalidRange, InvalidSeed, WriteError

WriteSpec = Callable[..., Path]


def approx_equal(x: float, y: float) -> bool:
    return abs(x - y) < 1e-14


class TestEnumerationEnsemble:
    """Load an enumeration and check every member."""

    def test_type_and_settings(self, enumeration_spec: Path) -> None:
        """Test the ensemble type and settings."""
        ensemble = paramstudy.load(enumeration_spec, "settings")

        assert ensemble.type() == EnsembleType.ENUMERATION
        settings = ensemble.settings()
        assert settings.has("param1")
        assert settings.get("param1") == "hello"
        assert settings.get("param2") == "81"
        assert settings.get("param3") == "3.14159265357"
        assert not settings.has("nonexistent_param")

    def test_members(self, enumeration_spec: Path) -> None:
        """Test fixed and varying inputs of every member."""
        ensemble = paramstudy.load(enumeration_spec, "settings")
        assert ensemble.size() == 11
        assert len(ensemble) == 11

        def check(inp: Input) -> dict[str, float]:
            assert approx_equal(inp.get("p1"), 1.0)
            assert approx_equal(inp.get("p2"), 2.0)
            assert approx_equal(inp.get("p3"), 3.0)
            assert 0.0 <= inp.get("tick") <= 10.0
            assert 1e1 <= inp.get("tock") <= 1e11

            assert not inp.has("invalid_param")
            with pytest.raises(KeyNotFound):
                _ = inp.get("invalid_param")

            return {"qoi": 4.0}

        ensemble.process(check)

        for member in ensemble:
            assert member.output.get("qoi") == 4.0
        assert [m.input.get("tick") for m in ensemble] == [float(i) for i in range(11)]
        assert ensemble[10].input.get("tock") == 1e11

    def test_input_key_sets_match(self, enumeration_spec: Path) -> None:
        """Test that every member has the same input names."""
        ensemble = paramstudy.load(enumeration_spec)
        expected = ["p1", "p2", "p3", "tick", "tock"]
        assert ensemble.input_names == expected
        assert all(list(m.input) == expected for m in ensemble)


class TestLatticeEnsemble:
    """Tests for the 3 x 3 lattice."""

    def test_member_order(self, lattice_spec: Path) -> None:
        """Test member count and the first and last members."""
        ensemble = paramstudy.load(lattice_spec)

        assert ensemble.type() is EnsembleType.LATTICE
        assert ensemble.size() == 9
        first, last = ensemble[0].input, ensemble[8].input
        assert (first.get("tick"), first.get("tock"), first.get("p1")) == (0.0, 10.0, 1.0)
        assert (last.get("tick"), last.get("tock"), last.get("p1")) == (10.0, 1e11, 1.0)

    def test_member_indices(self, lattice_spec: Path) -> None:
        """Test that members know their position."""
        ensemble = paramstudy.load(lattice_spec)
        assert [m.index for m in ensemble] == list(range(9))
        assert len(ensemble[2:5]) == 3

    def test_infinite_range_bound(self, write_spec: WriteSpec) -> None:
        """Test that an infinite range bound fails to load instead of giving nan members."""
        path = write_spec("""
            type: lattice
            input:
              lattice:
                x: {min: 0, max: inf, count: 3}
        """)
        with pytest.raises(InvalidRange, match="finite"):
            _ = paramstudy.load(path, None)


class TestSampledEnsemble:
    """Tests for sampled ensembles loaded from files."""

    SPEC = """
        type: halton
        count: 16
        input:
          fixed:
            k: 2
          sampled:
            x: {min: 0, max: 1}
            y: {min: 10, max: 20}
    """

    def test_reproducible_with_default_seed(self, write_spec: WriteSpec) -> None:
        """Test that loading twice gives identical members."""
        path = write_spec(self.SPEC)
        first = paramstudy.load(path, None)
        second = paramstudy.load(path, None)
        assert first.size() == 16
        assert [m.input for m in first] == [m.input for m in second]

    def test_seed_argument(self, write_spec: WriteSpec) -> None:
        """Test that the seed argument changes an unseeded draw."""
        path = write_spec(self.SPEC)
        a = paramstudy.load(path, None, seed=1)
        b = paramstudy.load(path, None, seed=2)
        assert [m.input for m in a] != [m.input for m in b]

    def test_configured_seed(
        self, write_spec: WriteSpec, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that PARAMSTUDY_SEED sets the default seed."""
        path = write_spec(self.SPEC)
        monkeypatch.setenv("PARAMSTUDY_SEED", "5")
        from_env = paramstudy.load(path, None)
        explicit = paramstudy.load(path, None, seed=5)
        assert [m.input for m in from_env] == [m.input for m in explicit]

    def test_negative_seed_argument(self, write_spec: WriteSpec) -> None:
        """Test that a negative seed argument is a typed error."""
        path = write_spec(self.SPEC)
        with pytest.raises(InvalidSeed) as exc_info:
            _ = paramstudy.load(path, None, seed=-1)
        assert exc_info.value.seed == -1

    def test_negative_environment_seed(
        self, write_spec: WriteSpec, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that a negative PARAMSTUDY_SEED is a typed error."""
        path = write_spec(self.SPEC)
        monkeypatch.setenv("PARAMSTUDY_SEED", "-3")
        with pytest.raises(InvalidSeed) as exc_info:
            _ = paramstudy.load(path, None)
        assert exc_info.value.seed == -3

    def test_negative_configured_seed(self, write_spec: WriteSpec, temp_dir: Path) -> None:
        """Test that a negative default_seed in config.yaml is a typed error."""
        path = write_spec(self.SPEC)
        config_dir = temp_dir / ".paramstudy"
        config_dir.mkdir()
        _ = (config_dir / "config.yaml").write_text("default_seed: -4\n")
        with pytest.raises(InvalidSeed) as exc_info:
            _ = paramstudy.load(path, None)
        assert exc_info.value.seed == -4


class TestProcess:
    """Tests for Ensemble.process()."""

    def make_ensemble(self, n: int = 8) -> Ensemble:
        return Ensemble("enumeration", [{"x": float(i)} for i in range(n)])

    def test_outputs_are_stored_on_members(self) -> None:
        """Test that returned mappings become member outputs."""
        ensemble = self.make_ensemble()
        ensemble.process(lambda inp: {"y": inp.get("x") ** 2})
        assert [m.output.get("y") for m in ensemble] == [float(i * i) for i in range(8)]

    def test_none_records_nothing(self) -> None:
        """Test that a function may skip members."""
        ensemble = self.make_ensemble(4)
        ensemble.process(lambda inp: {"y": 1.0} if inp.get("x") > 1 else None)
        assert ensemble.output_names == ["y"]
        assert [m.output.has("y") for m in ensemble] == [False, False, True, True]

    def test_each_member_visited_once(self) -> None:
        """Test that one pass calls the function once per member."""
        ensemble = self.make_ensemble(10)
        seen: list[float] = []
        lock = threading.Lock()

        def record(inp: Input) -> None:
            with lock:
                seen.append(inp.get("x"))

        ensemble.process(record, workers=4)
        assert sorted(seen) == [float(i) for i in range(10)]

    def test_parallel_matches_serial(self) -> None:
        """Test that a thread pool gives the same outputs as a serial pass."""
        serial = self.make_ensemble(50)
        parallel = self.make_ensemble(50)

        def fn(inp: Input) -> dict[str, float]:
            return {"y": 3.0 * inp.get("x") + 1.0}

        serial.process(fn)
        parallel.process(fn, workers=8)
        assert [m.output for m in serial] == [m.output for m in parallel]

    def test_failure_propagates_and_keeps_partial_outputs(self) -> None:
        """Test that an exception aborts the pass without rolling back."""
        ensemble = self.make_ensemble(6)

        def fn(inp: Input) -> dict[str, float]:
            if inp.get("x") == 3.0:
                msg = "diverged"
                raise RuntimeError(msg)
            return {"y": 1.0}

        with pytest.raises(RuntimeError, match="diverged"):
            ensemble.process(fn)
        assert [m.output.has("y") for m in ensemble] == [True, True, True, False, False, False]

    def test_missing_input_propagates(self) -> None:
        """Test that reading an undeclared input aborts processing."""
        ensemble = self.make_ensemble(3)
        with pytest.raises(KeyNotFound):
            ensemble.process(lambda inp: {"y": inp.get("z")})

    def test_non_mapping_result(self) -> None:
        """Test that returning a bare number is an error."""
        ensemble = self.make_ensemble(2)
        with pytest.raises(TypeError, match="mapping"):
            ensemble.process(lambda inp: inp.get("x"))  # type: ignore[arg-type,return-value]

    def test_invalid_worker_count(self) -> None:
        """Test that at least one worker is required."""
        with pytest.raises(ValueError, match="workers"):
            self.make_ensemble().process(lambda inp: None, workers=0)

    def test_direct_output_writes(self) -> None:
        """Test filling outputs by iterating members."""
        ensemble = self.make_ensemble(3)
        for member in ensemble:
            member.output.set("twice", 2 * member.input.get("x"))
        assert ensemble[2].output.get("twice") == 4.0

    def test_write_during_processing_fails(self, temp_dir: Path) -> None:
        """Test that results cannot be written from inside a pass."""
        ensemble = self.make_ensemble(2)

        def fn(inp: Input) -> None:
            _ = ensemble.write(temp_dir / "early.py")

        with pytest.raises(WriteError, match="still being processed"):
            ensemble.process(fn)
        assert not (temp_dir / "early.py").exists()


class TestConstruction:
    """Tests for building ensembles directly."""

    def test_empty_ensemble_rejected(self) -> None:
        """Test that an ensemble needs at least one member."""
        with pytest.raises(InvalidCount):
            _ = Ensemble("lattice", [])

    def test_unknown_type_rejected(self) -> None:
        """Test that the type tag must be a known strategy."""
        with pytest.raises(ValueError):
            _ = Ensemble("spiral", [{"x": 1.0}])

    def test_repr(self) -> None:
        """Test the ensemble repr."""
        ensemble = Ensemble("random", [{"x": 1.0}, {"x": 2.0}])
        assert repr(ensemble) == "Ensemble(type='random', size=2)"
