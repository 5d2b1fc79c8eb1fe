#!/usr/bin/env python3
"""
SNWS2 Python SDK - Request Signing Example

This example demonstrates how to use the SNWS2 Python SDK to authorize
SolarNetwork API requests with the SNWS2 HMAC-SHA256 scheme. No requests are
sent; the Authorization header values are printed instead.
"""

import json
from datetime import datetime, timezone

import requests

from snws2_sdk import (
    AuthorizationV2Builder,
    HttpContentType,
    HttpMethod,
    MissingSigningKeyError,
    SNWS2Auth,
    sign_prepared_request,
)

TOKEN_ID = "example-token"
TOKEN_SECRET = "example-token-secret"


def basic_signing_example():
    """Demonstrate signing a GET request"""
    print("=== Basic Request Signing Example ===")

    builder = (AuthorizationV2Builder(TOKEN_ID)
               .url("https://data.solarnetwork.net/solarquery/api/v1/sec/datum/list?nodeId=123")
               .sn_date(True))

    print(f"   Canonical request:\n{builder.build_canonical_request_data()}")
    print(f"\n   X-SN-Date: {builder.request_date_header_value}")
    print(f"   Authorization: {builder.build(TOKEN_SECRET)}")


def saved_key_example():
    """Demonstrate re-using a saved signing key"""
    print("\n\n=== Saved Signing Key Example ===")

    builder = AuthorizationV2Builder(TOKEN_ID).save_signing_key(TOKEN_SECRET)
    print(f"   Key valid: {builder.signing_key_valid}")
    print(f"   Key expires: {builder.signing_key_expiration_date.isoformat()}")

    for path in ("/solarquery/api/v1/sec/nodes", "/solarquery/api/v1/sec/range/interval"):
        authorization = builder.reset().path(path).sn_date(True).build_with_saved_key()
        print(f"   {path}: {authorization}")


def post_example():
    """Demonstrate signing a POST with a JSON body"""
    print("\n\n=== POST Request Example ===")

    body = json.dumps({"nodeId": 123, "topic": "SetControlParameter"})
    builder = (AuthorizationV2Builder(TOKEN_ID)
               .method(HttpMethod.POST)
               .url("https://data.solarnetwork.net/solaruser/api/v1/sec/instr/add")
               .content_type(HttpContentType.APPLICATION_JSON_UTF8.value)
               .compute_content_digest(body)
               .sn_date(True))

    print(f"   Digest: {builder.http_headers.first_value('Digest')}")
    print(f"   Authorization: {builder.build(TOKEN_SECRET)}")


def http_integration_example():
    """Demonstrate requests integration"""
    print("\n\n=== HTTP Client Integration Example ===")

    auth = SNWS2Auth(TOKEN_ID, token_secret=TOKEN_SECRET)
    request = requests.Request(
        "GET",
        "https://data.solarnetwork.net/solarquery/api/v1/sec/datum/list",
        params={"nodeId": 123, "startDate": "2024-01-01"},
    ).prepare()

    sign_prepared_request(request, auth)
    for name in ("X-SN-Date", "Authorization"):
        print(f"   {name}: {request.headers[name]}")


def error_handling_example():
    """Demonstrate error handling"""
    print("\n\n=== Error Handling Example ===")

    try:
        AuthorizationV2Builder(TOKEN_ID).build_with_saved_key()
    except MissingSigningKeyError as e:
        print(f"   Missing key: {type(e).__name__}: {e}")

    builder = AuthorizationV2Builder(TOKEN_ID).date(datetime(2017, 4, 25, tzinfo=timezone.utc))
    builder.save_signing_key(TOKEN_SECRET)
    print(f"   Old key valid: {builder.signing_key_valid}")


def main():
    """Run all examples"""
    print("SNWS2 Python SDK - Request Signing Examples")
    print("=" * 50)

    basic_signing_example()
    saved_key_example()
    post_example()
    http_integration_example()
    error_handling_example()


if __name__ == "__main__":
    main()
