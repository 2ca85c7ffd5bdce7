"""
Unit tests for volume create options.
"""

import pytest

from sfvp.daemon.options import GB, CreateOptions
from sfvp.sfapi.exceptions import InvalidVolumeOptions


class TestCreateOptions:
    """Tests for CreateOptions.from_request."""

    @pytest.mark.unit
    def test_no_options(self):
        options = CreateOptions.from_request(None)

        assert options.size is None
        assert options.type is None
        assert options.qos is None
        assert not options.is_clone

    @pytest.mark.unit
    def test_size_in_decimal_gb(self):
        options = CreateOptions.from_request({"size": "10"})

        assert options.size == 10 * GB
        assert options.size == 10_000_000_000

    @pytest.mark.unit
    def test_keys_are_case_insensitive(self):
        options = CreateOptions.from_request(
            {"Size": "2", "TYPE": "Gold", "QoS": "100,200,300", "FromSnapshot": "nightly_1"}
        )

        assert options.size == 2 * GB
        assert options.type == "Gold"
        assert options.qos == "100,200,300"
        assert options.from_snapshot == "nightly-1"

    @pytest.mark.unit
    def test_clone_source_is_canonicalized(self):
        options = CreateOptions.from_request({"from": "base_image"})

        assert options.from_volume == "base-image"
        assert options.is_clone

    @pytest.mark.unit
    def test_empty_values_are_unset(self):
        options = CreateOptions.from_request({"size": "", "type": " ", "from": ""})

        assert options.size is None
        assert options.type is None
        assert not options.is_clone

    @pytest.mark.unit
    def test_unknown_keys_are_ignored(self):
        options = CreateOptions.from_request({"fstype": "xfs", "size": "1"})

        assert options.size == GB

    @pytest.mark.unit
    @pytest.mark.parametrize("size", ["abc", "0", "-3", "1.5"])
    def test_invalid_size(self, size):
        with pytest.raises(InvalidVolumeOptions, match="size"):
            CreateOptions.from_request({"size": size})

    @pytest.mark.unit
    def test_options_are_immutable(self):
        options = CreateOptions.from_request({"size": "1"})

        with pytest.raises(Exception):
            options.size = 5
