import logging
from typing import List, Mapping, Optional, Tuple, Union

from event_manager.core.database_manager import DatabaseManager
from event_manager.core.errors import IncorrectPasswordError, UnknownOrganiserError
from event_manager.core.security import verify_organiser_password
from event_manager.core.sessions import SessionStore
from event_manager.crud import organiser as organiser_crud
from event_manager.schemas.organiser import Organiser, OrganiserSession
from event_manager.utils.forms import parse_id

logger = logging.getLogger(__name__)


class AuthService:
    """
    Organiser login against configured per-organiser passwords.

    Passwords are looked up by organiser id in configuration; the
    organisers table only supplies names for the login drop-down.
    """

    def __init__(
        self,
        db: DatabaseManager,
        sessions: SessionStore,
        passwords: Mapping[int, str],
    ) -> None:
        self._db = db
        self._sessions = sessions
        self._passwords = passwords

    async def list_organisers(self) -> List[Organiser]:
        async with self._db.get_session() as db:
            organisers = await organiser_crud.get_organisers(db)
            return [Organiser.model_validate(o) for o in organisers]

    async def get_organiser(self, organiser_id: int) -> Optional[Organiser]:
        async with self._db.get_session() as db:
            organiser = await organiser_crud.get_organiser(db, organiser_id)
            return Organiser.model_validate(organiser) if organiser else None

    async def login(
        self, organiser_id: Union[int, str, None], password: Optional[str]
    ) -> Tuple[str, OrganiserSession]:
        parsed_id = parse_id(organiser_id)
        if parsed_id is None:
            logger.info("Login rejected: invalid organiser id %r", organiser_id)
            raise UnknownOrganiserError()

        organiser = await self.get_organiser(parsed_id)
        if organiser is None:
            logger.info("Login rejected: unknown organiser %s", parsed_id)
            raise UnknownOrganiserError()

        if not verify_organiser_password(self._passwords.get(parsed_id), password):
            logger.info("Login rejected: incorrect password for organiser %s", parsed_id)
            raise IncorrectPasswordError()

        token = await self._sessions.create(organiser)
        logger.info("Organiser %s logged in", parsed_id)
        return token, OrganiserSession(
            organiser_id=organiser.organiser_id, organiser_name=organiser.name
        )

    async def logout(self, token: Optional[str]) -> None:
        await self._sessions.destroy(token)

    async def current_session(self, token: Optional[str]) -> Optional[OrganiserSession]:
        session = await self._sessions.get(token)
        if session is None or not session.is_authenticated:
            return None
        return session
