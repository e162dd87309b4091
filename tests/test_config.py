"""
Settings defaults from the environment and host config parsing.
"""
import pytest

from oss_uploads.config import HostConfig, Settings, parse_int

OSS_ENV = [
    "OSS_ACCESS_KEY_ID",
    "OSS_SECRET_ACCESS_KEY",
    "OSS_DEFAULT_REGION",
    "OSS_UPLOADS_BUCKET",
    "OSS_UPLOADS_PATH",
    "OSS_UPLOADS_HOST",
    "OSS_ENDPOINT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in OSS_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings(_env_file=None)

    assert settings.OSS_ACCESS_KEY_ID == ""
    assert settings.OSS_SECRET_ACCESS_KEY == ""
    assert settings.OSS_DEFAULT_REGION == "oss-cn-hangzhou"
    assert settings.OSS_UPLOADS_BUCKET is None
    assert settings.OSS_UPLOADS_PATH is None
    assert settings.OSS_UPLOADS_HOST is None
    assert settings.endpoint == "https://oss-cn-hangzhou.aliyuncs.com"


def test_reads_environment(clean_env):
    clean_env.setenv("OSS_ACCESS_KEY_ID", "LTAI-example")
    clean_env.setenv("OSS_SECRET_ACCESS_KEY", "secret")
    clean_env.setenv("OSS_DEFAULT_REGION", "oss-cn-beijing")
    clean_env.setenv("OSS_UPLOADS_BUCKET", "forum-uploads")
    clean_env.setenv("OSS_UPLOADS_PATH", "/uploads")
    clean_env.setenv("OSS_UPLOADS_HOST", "cdn.example.com")

    settings = Settings(_env_file=None)

    assert settings.OSS_ACCESS_KEY_ID == "LTAI-example"
    assert settings.OSS_UPLOADS_BUCKET == "forum-uploads"
    assert settings.OSS_UPLOADS_PATH == "/uploads"
    assert settings.OSS_UPLOADS_HOST == "cdn.example.com"
    assert settings.endpoint == "https://oss-cn-beijing.aliyuncs.com"


def test_empty_bucket_is_unset(clean_env):
    clean_env.setenv("OSS_UPLOADS_BUCKET", "")

    assert Settings(_env_file=None).OSS_UPLOADS_BUCKET is None


def test_settings_are_read_only(clean_env):
    settings = Settings(_env_file=None)

    with pytest.raises(Exception):
        settings.OSS_UPLOADS_BUCKET = "other"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2048", 2048),
        (2048, 2048),
        (" 512kb", 512),
        (12.9, 12),
        ("abc", None),
        ("", None),
        (None, None),
        (True, None),
    ],
)
def test_parse_int(value, expected):
    assert parse_int(value) == expected


def test_host_config_ceiling_in_bytes():
    config = HostConfig(maximumFileSize="2048")

    assert config.maximum_file_size == 2048
    assert config.max_size_bytes == 2048 * 1024


def test_host_config_without_ceiling():
    assert HostConfig().max_size_bytes is None
    assert HostConfig(maximumFileSize="unlimited").max_size_bytes is None


@pytest.mark.parametrize("value, expected", [(None, 128), ("0", 128), ("abc", 128), ("256", 256), (64, 64)])
def test_image_dimension_default(value, expected):
    assert HostConfig(profileImageDimension=value).image_dimension == expected


def test_host_config_accepts_field_names():
    config = HostConfig.model_validate({"maximum_file_size": 10, "profile_image_dimension": 32})

    assert config.max_size_bytes == 10240
    assert config.image_dimension == 32
