"""Customer domain constants.

``ErrorCode`` is the closed set of business failures the customer
service can report.  The transport layer maps each member to an HTTP
status; adding a failure mode means adding a member here, never a
free-form string.
"""

from enum import StrEnum


class ErrorCode(StrEnum):
    CUSTOMER_ALREADY_EXISTS = "Customer Already Exists"
    CUSTOMER_DOES_NOT_EXIST = "Customer Does Not Exist"
    CUSTOMER_DOES_NOT_HAVE_AN_ADDRESS = "Customer Does Not Have An Address"
    COULD_NOT_GET_GEOLOCATION = "Could Not Get Geolocation from Customer's Address"


VAT_NUMBER_PATTERN = r"^[0-9]{9}$"
