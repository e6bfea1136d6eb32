"""
    ------------------------------------------------------------------------------
    Settings for advanced users
    ------------------------------------------------------------------------------
"""


# Account shuffle flag (vote program only, report keeps the shuffled order)
shuffle_flag = False
MAX_RETRY_ATTEMPTS = 3                                              # Retries for failed HTTP requests
RETRY_SLEEP_RANGE = (1.5, 5.0)                                      # (min, max) in seconds


"""--------------------------------- Display ----------------------------"""
SHORT_ADDRESS_HEAD = 6                                              # 0x1234...
SHORT_ADDRESS_TAIL = 4                                              # ...abcd
NOTE_MAX_LENGTH = 50                                                # Error note in the report table
STATUS_MAX_LENGTH = 20                                              # Error status next to a progress bar
NAME_MAX_LENGTH = 20


"""--------------------------------- Transactions ----------------------------"""
NONCE_RETRY_ATTEMPTS = 3                                            # Resend with a fresh nonce on "nonce too low"
RPC_THROTTLE = (10, 1)                                              # (requests, period sec) per wallet
