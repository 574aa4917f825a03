"""Tests for assembly configuration."""

import pytest

from contigger_core.config import AssemblyConfig, load_config
from contigger_core.exceptions import ConfigError


def test_mode_defaults():
    """Both modes deduplicate; only chain mode drops reads with rare k-mers."""
    chain = AssemblyConfig()
    eulerian = AssemblyConfig(mode="eulerian")

    assert (chain.threshold, chain.deduplicate) == (2, True)
    assert (eulerian.threshold, eulerian.deduplicate) == (1, True)
    assert not eulerian.kmerize


def test_resolve_fills_k_and_merlen():
    """k comes from the first read and merlen is capped at k."""
    resolved = AssemblyConfig().resolve(["ACGTACGT", "CGTACGTA"])
    assert (resolved.k, resolved.merlen) == (8, 8)

    resolved = AssemblyConfig(k=50).resolve(["A" * 60])
    assert (resolved.k, resolved.merlen) == (50, 30)

    assert AssemblyConfig().resolve([]).k is None


def test_invalid_values_are_rejected():
    """Bad parameters raise ConfigError."""
    with pytest.raises(ConfigError):
        AssemblyConfig(mode="greedy")
    with pytest.raises(ConfigError):
        AssemblyConfig(k=1)
    with pytest.raises(ConfigError):
        AssemblyConfig(threshold=0)
    with pytest.raises(ConfigError):
        AssemblyConfig(time_limit=0)
    with pytest.raises(ConfigError):
        AssemblyConfig(kmerize=True)
    with pytest.raises(ConfigError):
        AssemblyConfig(mode="eulerian", kmerize=True).resolve(["ACGTACGT"])


def test_load_yaml_with_overrides(tmp_path):
    """YAML values load and non-None overrides win."""
    path = tmp_path / "assembly.yaml"
    path.write_text("k: 31\nmerlen: 17\nthreshold: 3\nmode: chain\n")

    config = load_config(path, threshold=4, mode=None)

    assert config.k == 31
    assert config.merlen == 17
    assert config.threshold == 4
    assert config.mode == "chain"


def test_load_config_errors(tmp_path):
    """Unknown keys, bad YAML and missing files all raise ConfigError."""
    unknown = tmp_path / "unknown.yaml"
    unknown.write_text("k: 31\nbubble_popping: true\n")
    with pytest.raises(ConfigError):
        load_config(unknown)

    broken = tmp_path / "broken.yaml"
    broken.write_text("k: [31\n")
    with pytest.raises(ConfigError):
        load_config(broken)

    listing = tmp_path / "listing.yaml"
    listing.write_text("- 31\n")
    with pytest.raises(ConfigError):
        load_config(listing)

    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml")

    wrong_type = tmp_path / "wrong_type.yaml"
    wrong_type.write_text("k: thirty\n")
    with pytest.raises(ConfigError):
        load_config(wrong_type)


def test_empty_yaml_gives_defaults(tmp_path):
    """An empty file is the default configuration."""
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert load_config(path) == AssemblyConfig()


if __name__ == "__main__":
    test_mode_defaults()
    test_resolve_fills_k_and_merlen()
    test_invalid_values_are_rejected()
    print("All tests passed!")
