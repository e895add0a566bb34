class IndexOutOfRange(IndexError):
    '''Raised when a record position does not exist in a skill.'''

    def __init__(self, index: int, length: int):
        super().__init__(f'Record index {index} out of range for {length} records')
        self.index = index
        self.length = length


class SkillNotFound(KeyError):
    '''Raised when a skill id is not part of the sheet.'''

    def __init__(self, skill_id: str):
        super().__init__(skill_id)
        self.skill_id = skill_id

    def __str__(self) -> str:
        return f'Skill {self.skill_id!r} not found'


class InvalidEntry(ValueError):
    '''Raised for user supplied dates or durations that cannot be parsed.'''
