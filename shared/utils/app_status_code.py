class AppStatusCode:
    # success
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    CREATED_SUCCESSFULLY = "101"
    UPDATED_SUCCESSFULLY = "102"
    DELETED_SUCCESSFULLY = "103"

    # client errors
    INVALID_INPUT = "200"
    REQUIRED_VALIDATION_ERROR = "201"
    DUPLICATE_RECORD = "202"
    RECORD_NOT_FOUND = "203"
    INSUFFICIENT_STOCK = "204"
    CONVERSION_UNAVAILABLE = "205"

    # auth
    AUTHENTICATION_TOKEN_INVALID = "300"
    AUTHENTICATION_TOKEN_EXPIRED = "301"
    AUTHENTICATION_INVALID_CREDENTIALS = "302"
    PERMISSION_DENIED = "303"
    AUTHENTICATION_USER_INVALID = "304"
    AUTHENTICATION_USER_INACTIVE = "305"

    # server
    OPERATION_FAILED = "500"
    PERSISTENCE_FAILED = "501"
