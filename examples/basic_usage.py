"""
Basic Passless usage example.

This example demonstrates:
- Building Google and Yandex authorization URLs
- Issuing passkey registration and authentication options
"""

import asyncio

from passless import Passless
from passless.passkey import options_to_json


async def basic_example():
    """Demonstrate basic Passless usage"""
    print("Basic Passless Example")
    print("=" * 30)

    # 1. Create instance; sections not given here come from PASSLESS_* variables
    passless = Passless({
        "google": {
            "client_id": "your-google-client-id.apps.googleusercontent.com",
            "redirect_uri": "http://localhost:3000/callback/google",
        },
        "yandex": {
            "client_id": "your-yandex-client-id",
            "redirect_uri": "http://localhost:3000/callback/yandex",
        },
        "passkey": {
            "rp_name": "My Awesome App",
            "rp_id": "localhost",
            "origin": "http://localhost:3000",
        },
    })

    async with passless:
        # 2. Authorization URLs
        print(f"✓ Google: {passless.get_auth_url('google', 'csrf-state')}")
        print(f"✓ Yandex: {passless.get_auth_url('yandex', 'csrf-state')}")

        # 3. After the redirect back, exchange the code on the server:
        #    result = await passless.exchange_code("google", code)
        #    result.token.access_token, result.profile["email"]

        # 4. Passkey registration options, sent to navigator.credentials.create()
        options = await passless.create_passkey_registration_options(
            "user-123", "user@example.com", "John Doe"
        )
        print(f"✓ Registration options: {options_to_json(options)}")

        # 5. Authentication options, sent to navigator.credentials.get()
        options = await passless.create_passkey_authentication_options("user-123")
        print(f"✓ Authentication options: {options_to_json(options)}")


if __name__ == "__main__":
    asyncio.run(basic_example())
