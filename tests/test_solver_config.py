"""
Tests for solver configuration and its .chc.yml loader.
"""

import pytest
import yaml

from chc_oracle.config import DEFAULT_RESOURCE_LIMIT, SolverConfig


class TestDefaults:
    """The default tuning keeps refutation proofs in hyper-resolution shape."""

    def test_fixedpoint_params(self):
        params = dict(SolverConfig().fixedpoint_params())
        assert params == {
            "engine": "spacer",
            "fp.spacer.q3.use_qgen": True,
            "fp.spacer.mbqi": False,
            "fp.spacer.ground_pobs": False,
            "fp.xform.slice": False,
            "fp.xform.inline_linear": False,
            "fp.xform.inline_eager": False,
        }

    def test_global_params(self):
        params = dict(SolverConfig().global_params())
        assert params == {
            "rewriter.pull_cheap_ite": True,
            "rlimit": DEFAULT_RESOURCE_LIMIT,
        }


class TestLoad:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert SolverConfig.load(tmp_path) == SolverConfig()

    def test_dashed_keys(self, tmp_path):
        (tmp_path / ".chc.yml").write_text(
            "solver:\n"
            "  resource-limit: 5000\n"
            "  use-qgen: false\n"
        )
        config = SolverConfig.load(tmp_path)
        assert config.resource_limit == 5000
        assert config.use_qgen is False
        assert config.inline_linear is False

    def test_underscored_keys_and_yaml_suffix(self, tmp_path):
        (tmp_path / ".chc.yaml").write_text("solver:\n  ground_pobs: true\n")
        config = SolverConfig.load(tmp_path)
        assert config.ground_pobs is True

    def test_empty_file(self, tmp_path):
        (tmp_path / ".chc.yml").write_text("")
        assert SolverConfig.load(tmp_path) == SolverConfig()

    def test_to_yaml_reloads(self, tmp_path):
        config = SolverConfig(resource_limit=42, mbqi=True)
        (tmp_path / ".chc.yml").write_text(config.to_yaml())
        assert SolverConfig.load(tmp_path) == config
        assert yaml.safe_load(config.to_yaml())["solver"]["resource-limit"] == 42


class TestBooleanValues:
    """Flags only accept booleans, quoted or not."""

    def test_quoted_false_stays_false(self):
        config = SolverConfig._from_dict({"solver": {"inline-linear": "false", "slice": "False"}})
        assert config.inline_linear is False
        assert config.slice is False

    def test_quoted_true(self):
        config = SolverConfig._from_dict({"solver": {"mbqi": "true"}})
        assert config.mbqi is True

    def test_quoted_false_from_file(self, tmp_path):
        (tmp_path / ".chc.yml").write_text('solver:\n  inline-eager: "false"\n')
        assert SolverConfig.load(tmp_path).inline_eager is False

    @pytest.mark.parametrize("value", ["no", "0", 1, None, "off"])
    def test_non_boolean_rejected(self, value):
        with pytest.raises(ValueError):
            SolverConfig._from_dict({"solver": {"inline-linear": value}})
