from secretjack import create_resolver



def main():
    # Example usage: a local credentials file in front of AWS Secrets Manager
    aws_config = {
        "region_name": "us-east-1",
        "profile_name": "default",
    }
    file_config = {"path": ".credentials"}

    resolver = create_resolver([("file", file_config), ("aws", aws_config)])
    otp = resolver.get_secret_value("magento/tfa/OTP_SHARED_SECRET")

    print(f"OTP secret resolved: {otp is not None}")

if __name__ == "__main__":
    main()
