import pytest
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError

from coordinator.deployment_layer.storage import CeremonyStorage
from coordinator.exceptions import UploadError


def client_error(code):
    return ClientError({"Error": {"Code": code, "Message": code}}, "HeadObject")


class FakeS3Client:
    def __init__(self, keys=(), head_error=None, upload_error=None):
        self.keys = set(keys)
        self.head_error = head_error
        self.upload_error = upload_error
        self.uploaded = []

    def head_object(self, Bucket, Key):
        if self.head_error is not None:
            raise self.head_error
        if Key not in self.keys:
            raise client_error("404")
        return {"ContentLength": 1}

    def upload_file(self, Filename, Bucket, Key):
        if self.upload_error is not None:
            raise self.upload_error
        self.uploaded.append((Filename, Bucket, Key))
        self.keys.add(Key)


def make_storage(client):
    return CeremonyStorage({"provider": "s3", "bucket": "ceremonies"}, client=client)


def test_requires_bucket():
    with pytest.raises(ValueError):
        CeremonyStorage({"provider": "s3", "bucket": ""}, client=FakeS3Client())


def test_exists_after_upload(tmp_path):
    local = tmp_path / "file.ptau"
    local.write_bytes(b"data")
    client = FakeS3Client()
    storage = make_storage(client)

    assert not storage.exists("c/pot/file.ptau")
    assert storage.upload(str(local), "c/pot/file.ptau") == "c/pot/file.ptau"
    assert storage.exists("c/pot/file.ptau")
    assert client.uploaded == [(str(local), "ceremonies", "c/pot/file.ptau")]


def test_exists_propagates_other_errors():
    storage = make_storage(FakeS3Client(head_error=client_error("403")))
    with pytest.raises(UploadError):
        storage.exists("c/pot/file.ptau")


def test_upload_of_missing_file(tmp_path):
    storage = make_storage(FakeS3Client())
    with pytest.raises(UploadError):
        storage.upload(str(tmp_path / "missing.zkey"), "c/x.zkey")


def test_upload_failure(tmp_path):
    local = tmp_path / "file.zkey"
    local.write_bytes(b"data")
    storage = make_storage(
        FakeS3Client(upload_error=S3UploadFailedError("Failed to upload"))
    )
    with pytest.raises(UploadError):
        storage.upload(str(local), "c/x.zkey")
