"""Filesystem abstraction over local directories and S3 buckets."""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class Adapter(ABC):
    """Storage backend used by :class:`Filesystem`."""

    @property
    @abstractmethod
    def path_prefix(self) -> str:
        """Location every relative path is resolved against."""
        pass

    @abstractmethod
    def has(self, path: str) -> bool:
        pass

    @abstractmethod
    def read(self, path: str) -> str:
        pass

    @abstractmethod
    def write(self, path: str, contents: str) -> None:
        pass

    @abstractmethod
    def delete(self, path: str) -> bool:
        pass

    @abstractmethod
    def list_contents(self) -> List[str]:
        pass


class LocalAdapter(Adapter):
    """Adapter rooted at a local directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    @property
    def path_prefix(self) -> str:
        return str(self.root)

    def _full_path(self, path: str) -> Path:
        return self.root / path

    def has(self, path: str) -> bool:
        return self._full_path(path).is_file()

    def read(self, path: str) -> str:
        with open(self._full_path(path), 'r', encoding='utf-8') as f:
            return f.read()

    def write(self, path: str, contents: str) -> None:
        target = self._full_path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'w', encoding='utf-8') as f:
            f.write(contents)

    def delete(self, path: str) -> bool:
        target = self._full_path(path)
        if not target.is_file():
            return False
        target.unlink()
        return True

    def list_contents(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(entry.name for entry in self.root.iterdir() if entry.is_file())


class S3Adapter(Adapter):
    """Adapter storing files as objects under a key prefix in an S3 bucket."""

    def __init__(
        self,
        bucket: str,
        prefix: str = '',
        region: Optional[str] = None,
        profile: Optional[str] = None
    ):
        """
        Initialize the S3 adapter.

        Args:
            bucket: Bucket name
            prefix: Key prefix acting as the root directory
            region: AWS region of the bucket
            profile: AWS profile name to use
        """
        self.session = boto3.Session(profile_name=profile) if profile else boto3.Session()
        self.client = self.session.client('s3', region_name=region)
        self.bucket = bucket
        self.prefix = prefix.strip('/')
        logger.debug(f"Initialized S3Adapter for s3://{self.bucket}/{self.prefix}")

    @property
    def path_prefix(self) -> str:
        return f"s3://{self.bucket}/{self.prefix}".rstrip('/')

    def _key(self, path: str) -> str:
        path = path.lstrip('/')
        return f"{self.prefix}/{path}" if self.prefix else path

    @staticmethod
    def _is_missing(error: ClientError) -> bool:
        code = error.response.get('Error', {}).get('Code', '')
        return code in ('404', 'NoSuchKey', 'NotFound')

    def has(self, path: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=self._key(path))
            return True
        except ClientError as e:
            if self._is_missing(e):
                return False
            raise

    def read(self, path: str) -> str:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=self._key(path))
        except ClientError as e:
            if self._is_missing(e):
                raise FileNotFoundError(f"{self.path_prefix}/{path}") from e
            raise
        return response['Body'].read().decode('utf-8')

    def write(self, path: str, contents: str) -> None:
        self.client.put_object(
            Bucket=self.bucket,
            Key=self._key(path),
            Body=contents.encode('utf-8')
        )

    def delete(self, path: str) -> bool:
        if not self.has(path):
            return False
        self.client.delete_object(Bucket=self.bucket, Key=self._key(path))
        return True

    def list_contents(self) -> List[str]:
        prefix = f"{self.prefix}/" if self.prefix else ''
        paginator = self.client.get_paginator('list_objects_v2')

        names = []
        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix, Delimiter='/'):
            for item in page.get('Contents', []):
                name = item['Key'][len(prefix):]
                if name:
                    names.append(name)
        return sorted(names)


class Filesystem:
    """Thin facade over an adapter, mirroring the operations the bootstrap needs."""

    def __init__(self, adapter: Adapter):
        self.adapter = adapter

    @property
    def path_prefix(self) -> str:
        return self.adapter.path_prefix

    def has(self, path: str) -> bool:
        return self.adapter.has(path)

    def read(self, path: str) -> str:
        return self.adapter.read(path)

    def put(self, path: str, contents: str) -> None:
        self.adapter.write(path, contents)

    def delete(self, path: str) -> bool:
        return self.adapter.delete(path)

    def list_files(self) -> List[str]:
        """List the files directly under the root, sorted by name."""
        return self.adapter.list_contents()


def make_filesystem(location: Union[str, Path], **kwargs) -> Filesystem:
    """
    Create a filesystem for a location.

    Args:
        location: Local directory or ``s3://bucket/prefix`` URL
        **kwargs: Extra arguments for the S3 adapter (region, profile)

    Returns:
        Filesystem instance
    """
    location = os.fspath(location)

    if location.startswith('s3://'):
        bucket, _, prefix = location[len('s3://'):].partition('/')
        return Filesystem(S3Adapter(bucket, prefix, **kwargs))

    return Filesystem(LocalAdapter(location))
