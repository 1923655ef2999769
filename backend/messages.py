from api_client import ApiClientError

FRIENDLY_MESSAGES = {
    "ALREADY_AUTHORIZED": "This voter is already authorized",
    "VOTER_NOT_AUTHORIZED": "You are not authorized to perform this action",
    "ELECTION_ENDED": "The election has ended",
    "ELECTION_ALREADY_ENDED": "The election has already ended",
    "INVALID_ADDRESS": "Please enter a valid Ethereum address",
    "ALREADY_VOTED": "You have already voted in this election",
    "INVALID_FIELD": "Please check the values you entered",
    "INVALID_CANDIDATE": "Please select a valid candidate",
    "CANDIDATE_EXISTS": "A candidate with this name already exists",
    "RESTART_REJECTED": "Failed to restart election. Please check your password.",
}

DEFAULT_MESSAGE = "An error occurred"
VOTE_FAILED = "Failed to cast vote. Please try again."
AUTHORIZE_FAILED = "Failed to authorize voter. Please try again."
CANDIDATE_FAILED = "Failed to add candidate. Please try again."
ELECTION_FAILED = "Failed to end election. Please try again."
RESTART_FAILED = "Failed to restart election. Please check your password."
PASSWORD_FAILED = "Failed to update restart password"
VOTE_STATUS_FAILED = "Failed to check vote status. Please try again."
LOAD_FAILED = "Failed to load election data. Please try again."


def get_error_message(error: Exception, default: str = DEFAULT_MESSAGE) -> str:
    code = error.code if isinstance(error, ApiClientError) else None
    return FRIENDLY_MESSAGES.get(code or "", default)
