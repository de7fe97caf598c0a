class VolleyScoutError(Exception):
    pass


class SetupValidationError(VolleyScoutError):
    pass


class InvalidTransitionError(VolleyScoutError):
    pass


class MatchNotStartedError(VolleyScoutError):
    pass


class PersistenceError(VolleyScoutError):
    pass


class SaveError(PersistenceError):
    pass


class LoadError(PersistenceError):
    pass
