class AppStatusCode:
    # Success
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    CREATED_SUCCESSFULLY = "101"
    UPDATED_SUCCESSFULLY = "102"
    DELETED_SUCCESSFULLY = "103"

    # Authentication
    AUTHENTICATION_TOKEN_INVALID = "200"
    AUTHENTICATION_TOKEN_EXPIRED = "201"
    AUTHENTICATION_ACCESS_DENIED = "202"

    # Input / resources
    INVALID_INPUT = "300"
    RESOURCE_NOT_FOUND = "301"
    DUPLICATE_ENTRY = "302"

    # Integrations
    POS_UPSTREAM_FAILED = "400"
    POS_NOT_CONFIGURED = "401"

    OPERATION_FAILED = "500"
