"""Tests for base/profiles.py and the Profile data model."""

import pytest

from realmctl.base.profiles import get_profile, list_profiles
from realmctl.base.types import Profile, Role
from realmctl.errors import ValidationError


class TestGetProfile:
    @pytest.mark.parametrize("name", ["chromie-3.3.5a", "3.3.5a", "335", "335a", "CHROMIE-3.3.5a"])
    def test_chromie_aliases(self, name: str):
        assert get_profile(name).name == "chromie-3.3.5a"

    @pytest.mark.parametrize("name", ["vanilla-1.12", "1.12", "112"])
    def test_vanilla_aliases(self, name: str):
        assert get_profile(name).name == "vanilla-1.12"

    def test_unknown(self):
        with pytest.raises(ValidationError, match="Unknown profile: tbc"):
            get_profile("tbc")

    def test_list(self):
        assert list_profiles() == ["chromie-3.3.5a", "vanilla-1.12"]


class TestProfileDict:
    def test_rules_survive_dict_form(self):
        profile = get_profile("vanilla-1.12")
        restored = Profile.from_dict(profile.to_dict())
        assert restored == profile
        assert restored.role_rules[0].role is Role.EXECUTABLE
        assert restored.role_rules[1].matches("Data/dbc.MPQ")
