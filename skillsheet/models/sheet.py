from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Iterator, Optional

from skillsheet.models.skill import Skill
from skillsheet.utils.constants import DEFAULT_PLAYER_NAME
from skillsheet.utils.errors import SkillNotFound


@dataclass
class Sheet:
    '''A player's full skill sheet: every tracked skill keyed by id.'''

    player_name: str = DEFAULT_PLAYER_NAME
    skills: dict[str, Skill] = field(default_factory=dict)

    def new_skill(self, name: Optional[str] = None) -> str:
        skill_id = uuid.uuid4().hex
        self.skills[skill_id] = Skill(name=name) if name else Skill()
        return skill_id

    def get_skill(self, skill_id: str) -> Skill:
        try:
            return self.skills[skill_id]
        except KeyError:
            raise SkillNotFound(skill_id) from None

    def delete_skill(self, skill_id: str) -> Skill:
        skill = self.get_skill(skill_id)
        del self.skills[skill_id]
        return skill

    def find_skills(self, text: str = '') -> list[tuple[str, Skill]]:
        '''Case-insensitive substring match on skill names, in sheet order.'''
        needle = (text or '').lower()
        return [(sid, s) for sid, s in self.skills.items() if needle in s.name.lower()]

    def __iter__(self) -> Iterator[tuple[str, Skill]]:
        return iter(self.skills.items())

    def __len__(self) -> int:
        return len(self.skills)
