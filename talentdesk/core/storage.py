"""
Resume storage layer supporting both the local filesystem and AWS S3.

Local files live under UPLOAD_DIR/resumes and are exposed by the static
/uploads mount, so the stored path doubles as the public URL path.
"""

import logging
import os
import uuid
from functools import lru_cache
from typing import BinaryIO
import boto3
from botocore.exceptions import ClientError
from talentdesk.core.config import settings

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"
RESUME_FOLDER = "resumes"


class StorageBackend:
    """Abstract base class for storage backends"""

    def save_resume(self, file: BinaryIO, filename: str) -> str:
        """Store a resume and return its stored path"""
        raise NotImplementedError

    def delete_file(self, file_path: str) -> bool:
        """Delete a stored file"""
        raise NotImplementedError

    def file_exists(self, file_path: str) -> bool:
        raise NotImplementedError

    def is_available(self) -> bool:
        """Used by the detailed health check"""
        raise NotImplementedError

    @staticmethod
    def _unique_name(filename: str) -> str:
        # Never reuse the client's filename, only its extension
        extension = os.path.splitext(filename or "")[1].lower() or ".pdf"
        return f"{uuid.uuid4().hex}{extension}"


class LocalStorage(StorageBackend):
    """Local filesystem storage backend"""

    def __init__(self, base_dir: str = "uploads"):
        self.base_dir = base_dir
        self.resume_dir = os.path.join(base_dir, RESUME_FOLDER)
        os.makedirs(self.resume_dir, exist_ok=True)

    def save_resume(self, file: BinaryIO, filename: str) -> str:
        """Write the resume under uploads/resumes and return its public path"""
        unique_filename = self._unique_name(filename)
        disk_path = os.path.join(self.resume_dir, unique_filename)

        with open(disk_path, "wb") as buffer:
            buffer.write(file.read())

        return f"{PUBLIC_PREFIX}/{RESUME_FOLDER}/{unique_filename}"

    def delete_file(self, file_path: str) -> bool:
        try:
            disk_path = self.resolve(file_path)
            if os.path.exists(disk_path):
                os.remove(disk_path)
                return True
            return False
        except OSError as e:
            logger.error(f"Error deleting file {file_path}: {e}")
            return False

    def file_exists(self, file_path: str) -> bool:
        return os.path.exists(self.resolve(file_path))

    def is_available(self) -> bool:
        return os.path.isdir(self.resume_dir) and os.access(self.resume_dir, os.W_OK)

    def resolve(self, file_path: str) -> str:
        """Map a public /uploads/... path onto the filesystem"""
        relative = file_path
        if relative.startswith(PUBLIC_PREFIX + "/"):
            relative = relative[len(PUBLIC_PREFIX) + 1:]
        # Only the basename inside resumes/ is trusted
        return os.path.join(self.resume_dir, os.path.basename(relative))


class S3Storage(StorageBackend):
    """AWS S3 storage backend"""

    def __init__(self):
        self.bucket_name = settings.S3_BUCKET_NAME

        # If AWS_ACCESS_KEY_ID is not set, boto3 will use IAM roles (for EC2/ECS)
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION
            )
        else:
            self.s3_client = boto3.client('s3', region_name=settings.AWS_REGION)

    def save_resume(self, file: BinaryIO, filename: str) -> str:
        """Upload the resume to S3 and return its s3:// URI"""
        s3_key = f"{RESUME_FOLDER}/{self._unique_name(filename)}"

        try:
            self.s3_client.upload_fileobj(
                file,
                self.bucket_name,
                s3_key,
                ExtraArgs={
                    'ContentType': 'application/pdf',
                    'ServerSideEncryption': 'AES256'
                }
            )
        except ClientError as e:
            logger.error(f"Error uploading to S3: {e}")
            raise

        return f"s3://{self.bucket_name}/{s3_key}"

    def delete_file(self, file_path: str) -> bool:
        s3_key = self._parse_s3_uri(file_path)

        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=s3_key)
            return True
        except ClientError as e:
            logger.error(f"Error deleting from S3: {e}")
            return False

    def file_exists(self, file_path: str) -> bool:
        s3_key = self._parse_s3_uri(file_path)

        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=s3_key)
            return True
        except ClientError:
            return False

    def is_available(self) -> bool:
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
            return True
        except ClientError:
            return False

    def _parse_s3_uri(self, s3_uri: str) -> str:
        """
        Extract the object key.

        Supports formats:
        - s3://bucket-name/key/path
        - resumes/name.pdf (assumes default bucket)
        """
        if s3_uri.startswith("s3://"):
            parts = s3_uri.replace("s3://", "").split("/", 1)
            if len(parts) == 2:
                return parts[1]
            raise ValueError(f"Invalid S3 URI format: {s3_uri}")
        return s3_uri


@lru_cache()
def get_storage() -> StorageBackend:
    """
    Storage backend selected by USE_S3.

    Used as a FastAPI dependency so tests can override it.
    """
    if settings.USE_S3:
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
        return S3Storage()
    return LocalStorage(settings.UPLOAD_DIR)
