#!/usr/bin/env python3
"""S3 Multipart Uploader - エントリーポイント"""
import argparse
import signal
import sys

from s3_multipart import (
    Config,
    S3Uploader,
    UploadContext,
    UploadRequest,
    UploaderError,
)


def parse_args(argv=None) -> argparse.Namespace:
    """コマンドライン引数を解析"""
    parser = argparse.ArgumentParser(description="Upload a file to S3-compatible storage")
    parser.add_argument("-b", dest="bucket", required=True, help="S3 bucket name")
    parser.add_argument("-f", dest="file_path", required=True, help="Path to the file to upload")
    parser.add_argument("-k", dest="key", default="",
                        help="Object key in S3 (optional, defaults to the file path)")
    parser.add_argument("--create-bucket", action="store_true",
                        help="Force create the bucket before uploading")
    parser.add_argument("--config", default=None,
                        help="JSON configuration file (defaults to S3_* environment variables)")
    return parser.parse_args(argv)


def install_signal_handlers(context: UploadContext):
    """SIGINT / SIGTERM でコンテキストをキャンセル"""
    def handler(signum, frame):
        print("Received shutdown signal, canceling upload...", file=sys.stderr)
        context.cancel()

    signal.signal(signal.SIGINT, handler)
    signal.signal(signal.SIGTERM, handler)


def main(argv=None) -> int:
    """メイン関数"""
    args = parse_args(argv)

    try:
        config = Config.from_file(args.config) if args.config else Config.from_env()
        uploader = S3Uploader(config)
    except UploaderError as e:
        print(f"Error initializing uploader: {e}", file=sys.stderr)
        return 1

    context = UploadContext()
    install_signal_handlers(context)

    try:
        if args.create_bucket:
            uploader.create_bucket(args.bucket)

        request = UploadRequest(
            bucket=args.bucket,
            file_path=args.file_path,
            key=args.key or args.file_path,
        )
        uploader.upload(request, context)
    except UploaderError as e:
        uploader.logger.error(f"Upload failed: {e}")
        return 1

    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
