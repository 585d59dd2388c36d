"""이어 붙인 PNG 스트림 분리.

/slice 응답은 길이 정보 없이 PNG 4개를 이어 붙인 바이트열이다.
시그니처 다음의 청크(length 4B + type 4B + data + CRC 4B)를 IEND까지 따라가면
각 PNG의 끝을 정확히 알 수 있다.
"""

import struct

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def split_png_stream(data: bytes) -> list[bytes]:
    images = []
    pos = 0
    while pos < len(data):
        if data[pos : pos + len(PNG_SIGNATURE)] != PNG_SIGNATURE:
            raise ValueError(f"PNG 시그니처가 아닙니다 (offset {pos})")

        start = pos
        pos += len(PNG_SIGNATURE)
        while True:
            if pos + 8 > len(data):
                raise ValueError(f"IEND 없이 스트림이 끝났습니다 (offset {start})")
            (length,) = struct.unpack(">I", data[pos : pos + 4])
            chunk_type = data[pos + 4 : pos + 8]
            pos += 12 + length
            if chunk_type == b"IEND":
                break

        if pos > len(data):
            raise ValueError(f"잘린 PNG 청크입니다 (offset {start})")
        images.append(data[start:pos])
    return images
