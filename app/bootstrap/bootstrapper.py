from app.controllers.studio import Studio
from app.dependencies.components import get_components
from app.dependencies.controllers import get_studio
from app.services.CredentialService.credential_service_interface import (
    KeySelectorProtocol,
)


async def bootstrap_studio(
    env: str = "development",
    config_path: str = "configuration",
    key_selector: KeySelectorProtocol | None = None,
) -> Studio:
    components = get_components(env=env, config_path=config_path)
    studio: Studio = get_studio(components, key_selector)
    return studio
