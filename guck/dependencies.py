from fastapi import Depends

from guck.config.settings import Settings, get_settings
from guck.protocols.diff_engine_protocol import DiffEngineProtocol
from guck.services.diff_engine_factory import create_diff_engine_from_settings


def get_diff_engine(settings: Settings = Depends(get_settings)) -> DiffEngineProtocol:
    return create_diff_engine_from_settings(settings)
