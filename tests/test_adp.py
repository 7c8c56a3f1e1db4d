from lsd2dsl.adp import decode_adp, replace_adp_ext_with_wav


def test_empty_input():
    assert decode_adp(b"") == []


def test_two_samples_per_byte():
    data = bytes(range(256))
    assert len(decode_adp(data)) == 2 * len(data)


def test_zero_code_small_steps():
    assert decode_adp(b"\x00") == [2, 4]


def test_sign_bit_mirrors():
    positive = decode_adp(b"\x00\x11\x22")
    negative = decode_adp(b"\x88\x99\xaa")
    assert negative == [-x for x in positive]


def test_clamps_to_int16():
    high = decode_adp(b"\x77" * 200)
    low = decode_adp(b"\xff" * 200)
    assert max(high) == 32767
    assert min(low) == -32768
    assert all(-32768 <= s <= 32767 for s in high + low)


def test_monotonic_for_positive_codes():
    samples = decode_adp(b"\x44" * 10)
    assert samples == sorted(samples)


def test_replace_extension():
    assert replace_adp_ext_with_wav("sound.ADP") == "sound.wav"
    assert replace_adp_ext_with_wav("dir/voice.adp") == "dir/voice.wav"


def test_replace_extension_other():
    assert replace_adp_ext_with_wav("image.png") is None
    assert replace_adp_ext_with_wav("adp") is None