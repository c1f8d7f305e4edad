"""
Roster and substitution management for the Courtside live tracker.

This module owns the on-court/bench partition of each team and the roster
provider port used to fetch eligible players before tip-off.
"""
import logging
from typing import Dict, Iterable, List, Optional, Protocol, Set

from ..models import GameState, PlayerRef, RosterState
from ..utils import PLAYERS_ON_COURT
from .errors import InsufficientRoster, InvalidRosterOperation

logger = logging.getLogger(__name__)


class RosterProvider(Protocol):
    """Outbound port: the team management collaborator."""

    def eligible_players(self, team_id: str) -> List[PlayerRef]:
        """Return regular and custom players eligible for this game."""
        ...


class StaticRosterProvider:
    """In-memory roster provider, used by tests and the demo server."""

    def __init__(self, rosters: Optional[Dict[str, Iterable[PlayerRef]]] = None):
        self._rosters: Dict[str, List[PlayerRef]] = {
            team_id: list(players) for team_id, players in (rosters or {}).items()
        }

    def add_team(self, team_id: str, players: Iterable[PlayerRef]) -> None:
        self._rosters[team_id] = list(players)

    def eligible_players(self, team_id: str) -> List[PlayerRef]:
        return list(self._rosters.get(team_id, []))


class RosterService:
    """Service enforcing the on-court roster invariants."""

    def __init__(self, game_state: GameState):
        self.game_state = game_state

    def load_team(
        self,
        team_id: str,
        eligible: Iterable[PlayerRef],
        starters: Iterable[PlayerRef],
    ) -> RosterState:
        """
        Set up a team's roster before gameplay starts.

        Args:
            team_id: Team to load
            eligible: All players eligible for this game
            starters: The five players starting on court

        Returns:
            The new RosterState

        Raises:
            InsufficientRoster: If fewer than 5 players are eligible
            InvalidRosterOperation: If starters are not 5 distinct eligible players
        """
        self.game_state.side_for(team_id)
        eligible_set: Set[PlayerRef] = set(eligible)
        starters_list = list(starters)
        starters_set = set(starters_list)

        if len(eligible_set) < PLAYERS_ON_COURT:
            raise InsufficientRoster(
                f"Team {team_id} has {len(eligible_set)} eligible players, needs {PLAYERS_ON_COURT}"
            )
        if len(starters_list) != PLAYERS_ON_COURT or len(starters_set) != PLAYERS_ON_COURT:
            raise InvalidRosterOperation(f"Team {team_id} must start exactly {PLAYERS_ON_COURT} distinct players")
        unknown = starters_set - eligible_set
        if unknown:
            names = ", ".join(sorted(str(ref) for ref in unknown))
            raise InvalidRosterOperation(f"Starters not eligible for team {team_id}: {names}")

        roster = RosterState(team_id=team_id, on_court=starters_set, bench=eligible_set - starters_set)
        self.game_state.rosters[team_id] = roster
        logger.info("Loaded roster for %s: %d eligible", team_id, len(eligible_set))
        return roster

    def roster_for(self, team_id: str) -> RosterState:
        roster = self.game_state.rosters.get(team_id)
        if roster is None:
            raise InvalidRosterOperation(f"No roster loaded for team {team_id}")
        return roster

    def has_roster(self, team_id: str) -> bool:
        return team_id in self.game_state.rosters

    def validate_ready(self, team_id: str) -> None:
        """
        Check a team can take the floor.

        Raises:
            InsufficientRoster: If the roster is missing or too small
            InvalidRosterOperation: If the partition is broken
        """
        roster = self.game_state.rosters.get(team_id)
        if roster is None or len(roster.eligible) < PLAYERS_ON_COURT:
            raise InsufficientRoster(f"Team {team_id} needs at least {PLAYERS_ON_COURT} eligible players")
        if roster.on_court & roster.bench:
            raise InvalidRosterOperation(f"Team {team_id} has players both on court and on the bench")
        if len(roster.on_court) != PLAYERS_ON_COURT:
            raise InvalidRosterOperation(
                f"Team {team_id} has {len(roster.on_court)} players on court, needs {PLAYERS_ON_COURT}"
            )

    def is_on_court(self, team_id: str, player: PlayerRef) -> bool:
        roster = self.game_state.rosters.get(team_id)
        return roster is not None and player in roster.on_court

    def is_eligible(self, team_id: str, player: PlayerRef) -> bool:
        roster = self.game_state.rosters.get(team_id)
        return roster is not None and player in roster.eligible

    def check_substitution(self, team_id: str, player_out: PlayerRef, player_in: PlayerRef) -> None:
        """Raise InvalidRosterOperation unless the swap would be legal."""
        roster = self.roster_for(team_id)
        if len(roster.eligible) < PLAYERS_ON_COURT:
            raise InsufficientRoster(f"Team {team_id} needs at least {PLAYERS_ON_COURT} eligible players")
        if player_out not in roster.on_court:
            raise InvalidRosterOperation(f"{player_out} is not on court for team {team_id}")
        if player_in not in roster.bench:
            raise InvalidRosterOperation(f"{player_in} is not on the bench for team {team_id}")
        if len(roster.on_court) != PLAYERS_ON_COURT:
            raise InvalidRosterOperation(f"Team {team_id} does not have {PLAYERS_ON_COURT} players on court")

    def substitute(self, team_id: str, player_out: PlayerRef, player_in: PlayerRef) -> RosterState:
        """Swap a player on court with one from the bench."""
        self.check_substitution(team_id, player_out, player_in)
        roster = self.game_state.rosters[team_id]
        roster.on_court.remove(player_out)
        roster.bench.add(player_out)
        roster.bench.remove(player_in)
        roster.on_court.add(player_in)
        logger.debug("Substitution for %s: %s -> %s", team_id, player_out, player_in)
        return roster
