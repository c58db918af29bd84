from __future__ import annotations
import os

import bittensor as bt
import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from coordinator.exceptions import UploadError

# Error codes returned by head_object for an absent key
MISSING_OBJECT_CODES = {"404", "NoSuchKey", "NotFound"}


class CeremonyStorage:
    """
    Durable object storage (R2/S3) holding the staged ceremony artifacts.

    Only two primitives are used by the setup: checking whether an object key
    exists and uploading a local file under a key.
    """

    def __init__(self, storage_config: dict, client=None):
        """
        Initialize the storage client.

        Args:
            storage_config: Storage configuration dict containing:
                - provider: 'r2' or 's3'
                - bucket: bucket name
                - account_id: account ID (required for R2)
                - access_key: access key ID
                - secret_key: secret key
                - region: region (required for S3)
            client: An already built S3 client, used instead of building one.
        """
        if not storage_config or not storage_config.get("bucket"):
            raise ValueError("Storage configuration with a bucket is required.")
        self.bucket = storage_config["bucket"]

        if client is not None:
            self.client = client
        elif storage_config.get("provider") == "r2":
            self.client = boto3.client(
                "s3",
                endpoint_url=f"https://{storage_config['account_id']}.r2.cloudflarestorage.com",
                aws_access_key_id=storage_config["access_key"],
                aws_secret_access_key=storage_config["secret_key"],
                config=Config(
                    retries={"max_attempts": 3},
                    connect_timeout=5,
                    read_timeout=30,
                    region_name="auto",
                ),
            )
        else:
            self.client = boto3.client(
                "s3",
                aws_access_key_id=storage_config.get("access_key"),
                aws_secret_access_key=storage_config.get("secret_key"),
                region_name=storage_config.get("region"),
                config=Config(
                    retries={"max_attempts": 3}, connect_timeout=5, read_timeout=30
                ),
            )

    def exists(self, key: str) -> bool:
        """
        Check whether an object is stored under the exact key.

        Raises:
            UploadError: If the check fails for any reason other than absence.
        """
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in MISSING_OBJECT_CODES:
                return False
            bt.logging.error(f"Storage existence check failed for {key}: {e}")
            raise UploadError(f"Unable to check storage for {key}") from e
        except BotoCoreError as e:
            bt.logging.error(f"Storage existence check failed for {key}: {e}")
            raise UploadError(f"Unable to check storage for {key}") from e

    def upload(self, local_path: str, key: str) -> str:
        """
        Upload a local file under a key.

        Returns:
            str: The object key.

        Raises:
            UploadError: If the file is missing or the write fails.
        """
        if not os.path.isfile(local_path):
            raise UploadError(f"Local file {local_path} does not exist")
        try:
            self.client.upload_file(local_path, self.bucket, key)
        except (S3UploadFailedError, ClientError, BotoCoreError) as e:
            bt.logging.error(f"Failed to upload {local_path} to {key}: {e}")
            raise UploadError(f"Failed to upload {local_path} to {key}") from e
        bt.logging.debug(f"Uploaded {local_path} to {self.bucket}/{key}")
        return key
