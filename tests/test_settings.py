import pytest

from peerlink import ConfigurationError, DeliveryMode, DeliverySettings
from peerlink.settings import correct_channel, correct_mode, require_channel, require_mode


def test_defaults():
    settings = DeliverySettings(max_channels=2)
    assert settings.mode == DeliveryMode.RELIABLE
    assert settings.channel == 0
    assert settings.default_mode == DeliveryMode.RELIABLE
    assert settings.default_channel == 0


@pytest.mark.parametrize("channel", [0, 1, 2, 3])
def test_valid_channel_applies_until_reset(channel):
    settings = DeliverySettings(max_channels=4)
    settings.set_channel(channel)
    assert settings.channel == channel
    settings.reset()
    assert settings.channel == 0


@pytest.mark.parametrize("channel", [4, 5, 255, -1, 1.5, "1", True, None])
def test_invalid_channel_becomes_zero_with_warning(channel):
    warnings = []
    settings = DeliverySettings(max_channels=4, warn=warnings.append)
    settings.set_channel(channel)
    assert settings.channel == 0
    assert len(warnings) == 1
    assert "invalid channel" in warnings[0]


def test_invalid_mode_becomes_reliable_with_warning():
    warnings = []
    settings = DeliverySettings(warn=warnings.append)
    settings.set_mode("unreliable")
    assert settings.mode == DeliveryMode.UNRELIABLE
    settings.set_mode("bogus")
    assert settings.mode == DeliveryMode.RELIABLE
    assert warnings == ["Tried to use invalid send mode: 'bogus'. Defaulting to reliable."]


def test_mode_accepts_enum_members():
    settings = DeliverySettings()
    settings.set_mode(DeliveryMode.UNSEQUENCED)
    assert settings.mode is DeliveryMode.UNSEQUENCED


def test_set_default_mode_bogus_raises_and_keeps_previous():
    settings = DeliverySettings()
    settings.set_default_mode("unsequenced")
    with pytest.raises(ConfigurationError):
        settings.set_default_mode("bogus")
    assert settings.default_mode == DeliveryMode.UNSEQUENCED


def test_set_default_channel_is_strict():
    settings = DeliverySettings(max_channels=3)
    settings.set_default_channel(2)
    with pytest.raises(ConfigurationError):
        settings.set_default_channel(3)
    assert settings.default_channel == 2


def test_reset_restores_defaults_and_is_idempotent():
    settings = DeliverySettings(max_channels=3)
    settings.set_default_mode("unreliable")
    settings.set_default_channel(1)
    settings.set_mode("unsequenced")
    settings.set_channel(2)

    settings.reset()
    settings.reset()
    assert settings.mode == DeliveryMode.UNRELIABLE
    assert settings.channel == 1


def test_validators():
    assert correct_mode("reliable", warn=pytest.fail) == DeliveryMode.RELIABLE
    assert correct_mode(42, warn=lambda msg: None) == DeliveryMode.RELIABLE
    assert require_mode("unreliable") == DeliveryMode.UNRELIABLE
    with pytest.raises(ConfigurationError):
        require_mode(None)

    assert correct_channel(0, 1, warn=pytest.fail) == 0
    assert correct_channel(1, 1, warn=lambda msg: None) == 0
    assert require_channel(3, 4) == 3
    with pytest.raises(ConfigurationError):
        require_channel(4, 4)
