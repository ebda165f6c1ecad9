# send_test_email.py
# Manual SMTP check: python send_test_email.py you@example.com

import sys

from storefront.services.notification_service import NotificationService


def main():
    if len(sys.argv) != 2:
        print("usage: python send_test_email.py <recipient>")
        sys.exit(2)

    print("Sending test email...")

    NotificationService().notify(
        to_email=sys.argv[1],
        subject="[Storefront] Test Email",
        html_body="<h1>HTML Test Email</h1><p>This is a <b>test</b> email.</p>",
    )

    print("If no errors: email sent! Check your inbox.")


if __name__ == "__main__":
    main()
