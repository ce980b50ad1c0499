# Authentication module

from campusnet.modules.auth.dependencies import (
    get_optional_identity,
    get_current_identity,
    get_current_admin,
    require_board_creator,
    require_internal_access,
    viewer_id_of,
)
