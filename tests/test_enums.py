from imageresizer.models.enums import ENCODER_GUIDS, Encoder, get_encoder_guid, get_encoder_index

def test_encoder_guids_round_trip():
    for index in range(6):
        assert get_encoder_index(get_encoder_guid(index)) == index

def test_jpeg_guid():
    assert get_encoder_guid(2) == "19e4a5aa-5662-4fc5-a0c0-1758028e1057"
    assert ENCODER_GUIDS[Encoder.GIF] == "1f8a5601-7d4d-4cbd-9c82-1bc8d4eeb9a5"

def test_unknown_values():
    assert get_encoder_guid(-1) is None
    assert get_encoder_guid(6) is None
    assert get_encoder_index("1B7CFAF4-713F-473C-BBCD-6137425FAEAF") == -1
    assert get_encoder_index("") == -1
    assert get_encoder_index(None) == -1
