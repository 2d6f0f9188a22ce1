from secret_store import ACCOUNT, SERVICE, MemorySecretStore, mask_credential


def test_empty_store():
    store = MemorySecretStore()

    assert store.has() is False
    assert store.get() is None
    assert store.delete() is True


def test_set_get_delete():
    store = MemorySecretStore()

    assert store.set(" raw value ") is True
    assert store.has() is True
    assert store.get() == " raw value "

    assert store.delete() is True
    assert store.has() is False


def test_single_slot_overwrites():
    store = MemorySecretStore(initial="first")
    store.set("second")

    assert store.get() == "second"
    assert (store.service, store.account) == (SERVICE, ACCOUNT)


def test_mask_credential():
    assert mask_credential("inc_live_abcdef123456") == "inc_live..."
