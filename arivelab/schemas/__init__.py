from arivelab.schemas.auth import RegisterRequest, LoginRequest, Token, AccountResponse, AccountWithRegistration, MeResponse
from arivelab.schemas.admin import ModerateRequest, RegistrationListResponse
from arivelab.schemas.content import SubmitContentRequest, UpdateContentRequest, ContentResponse
from arivelab.schemas.team import TeamMemberCreate, TeamMemberResponse
