from knotes_identity.domain.user.aggregates.user import LOCAL_SUBJECT_PREFIX, User

__all__ = ["LOCAL_SUBJECT_PREFIX", "User"]
