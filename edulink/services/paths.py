# edulink/services/paths.py
from edulink.schemas.enums import EntityType
from edulink.schemas.resolution import Hop, ReferencePath

USER_TO_CHILDREN = ReferencePath(
    name="user_to_children",
    hops=(
        Hop(entity_type=EntityType.USER, match_field="email"),
        Hop(entity_type=EntityType.PARENT_PROFILE, match_field="user_id", join_field="id"),
        Hop(entity_type=EntityType.CHILD_PROFILE, match_field="parent_id", join_field="id", many=True),
    ),
)

USER_TO_CLASSROOMS = ReferencePath(
    name="user_to_classrooms",
    hops=(
        Hop(entity_type=EntityType.USER, match_field="email"),
        Hop(entity_type=EntityType.TEACHER_PROFILE, match_field="user_id", join_field="id"),
        Hop(entity_type=EntityType.CLASSROOM, match_field="teacher_id", join_field="id", many=True),
    ),
)

CHILD_TO_PARENT_USER = ReferencePath(
    name="child_to_parent_user",
    hops=(
        Hop(entity_type=EntityType.CHILD_PROFILE, match_field="id"),
        Hop(entity_type=EntityType.PARENT_PROFILE, match_field="id", join_field="parent_id"),
        Hop(entity_type=EntityType.USER, match_field="id", join_field="user_id"),
    ),
)

CLASSROOM_TO_TEACHER_USER = ReferencePath(
    name="classroom_to_teacher_user",
    hops=(
        Hop(entity_type=EntityType.CLASSROOM, match_field="id"),
        Hop(entity_type=EntityType.TEACHER_PROFILE, match_field="id", join_field="teacher_id"),
        Hop(entity_type=EntityType.USER, match_field="id", join_field="user_id"),
    ),
)

CLASSROOM_ROSTER = ReferencePath(
    name="classroom_roster",
    hops=(
        Hop(entity_type=EntityType.CLASSROOM, match_field="id"),
        Hop(entity_type=EntityType.CLASSROOM_STUDENT, match_field="classroom_id", join_field="id", many=True),
    ),
)

PATHS = {
    path.name: path
    for path in (
        USER_TO_CHILDREN,
        USER_TO_CLASSROOMS,
        CHILD_TO_PARENT_USER,
        CLASSROOM_TO_TEACHER_USER,
        CLASSROOM_ROSTER,
    )
}
