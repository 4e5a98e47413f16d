import os
import time
import io
import requests
import streamlit as st

API_BASE = os.getenv("FILE_GATEWAY_API_BASE", os.getenv("API_BASE", "http://localhost:5000")).rstrip("/")

# Upload picker extensions; the server decides what is actually legal.
UPLOAD_EXTENSIONS = ["jpg", "jpeg", "png", "gif", "webp", "pdf", "doc", "docx"]
FALLBACK_FORMATS: dict[str, object] = {
    "supportedTypes": [],
    "maxSize": 10 * 1024 * 1024,
    "conversions": {"image": ["jpg", "jpeg", "png", "webp", "gif"], "document": ["pdf"], "pdf": ["*"]},
}


def _reset_state():
    for key in ["result", "result_name", "error"]:
        if key in st.session_state:
            del st.session_state[key]
    # Bump the uploader key to clear any previously uploaded file widget state
    if "upload_key" in st.session_state:
        st.session_state["upload_key"] += 1
    else:
        st.session_state["upload_key"] = 1


def _clear_result(state) -> None:
    for key in ("result", "result_name"):
        state.pop(key, None)


def _track_source(state, source_id: str) -> None:
    """Forget the previous result and error once a different file is picked."""
    if state.get("source_id") != source_id:
        _clear_result(state)
        state.pop("error", None)
        state["source_id"] = source_id


@st.cache_data(ttl=300)
def _fetch_formats() -> dict[str, object]:
    try:
        resp = requests.get(f"{API_BASE}/api/formats", timeout=10)
        resp.raise_for_status()
        return resp.json()
    except requests.RequestException:
        return FALLBACK_FORMATS


def _category_for(media_type: str) -> str:
    if media_type.startswith("image/"):
        return "image"
    if media_type == "application/pdf":
        return "pdf"
    return "document"


def _target_choices(media_type: str, file_name: str, formats: dict[str, object]) -> list[str]:
    conversions = formats.get("conversions") or {}
    targets = list(conversions.get(_category_for(media_type), []))  # type: ignore[union-attr]
    source_ext = os.path.splitext(file_name)[1].lower().lstrip(".")
    # Same-format requests are always rejected, and pdf only passes through.
    return [t for t in targets if t not in {"*", source_ext}]


def _convert(uploaded_file: io.BytesIO, target_format: str) -> bytes | None:
    files = {"file": (uploaded_file.name, uploaded_file.getvalue(), uploaded_file.type or "application/octet-stream")}
    data = {"targetFormat": target_format}
    try:
        resp = requests.post(f"{API_BASE}/api/convert", files=files, data=data, timeout=120)
    except requests.ConnectionError:
        st.session_state["error"] = "Server unavailable. Please try again later."
        return None
    except requests.RequestException as e:
        st.session_state["error"] = f"Failed to connect to API: {e}"
        return None
    if resp.status_code == 200:
        return resp.content
    try:
        body = resp.json()
    except ValueError:
        body = {}
    st.session_state["error"] = body.get("userMessage") or body.get("error") or f"Conversion failed ({resp.status_code})"
    return None


def main() -> None:
    st.set_page_config(page_title="File Converter", page_icon="🔄", layout="centered")
    st.title("🔄 File Converter")
    st.caption(f"API base: {API_BASE}")

    formats = _fetch_formats()
    max_mb = int(formats.get("maxSize", FALLBACK_FORMATS["maxSize"])) / 1024 / 1024  # type: ignore[arg-type]

    if st.button("Restart", type="secondary"):
        _reset_state()
        st.rerun()

    if "upload_key" not in st.session_state:
        st.session_state["upload_key"] = 0
    uploaded = st.file_uploader(
        f"Supported formats: JPG, PNG, GIF, WEBP, PDF, DOC, DOCX (max {max_mb:g}MB)",
        type=UPLOAD_EXTENSIONS,  # type: ignore[arg-type]
        key=f"uploader-{st.session_state['upload_key']}",
    )

    if uploaded:
        _track_source(st.session_state, f"{uploaded.name}:{uploaded.size}")
        if uploaded.type and uploaded.type.startswith("image/"):
            st.image(uploaded.getvalue(), width=240)
        choices = _target_choices(uploaded.type or "", uploaded.name, formats)
        if not choices:
            st.info("No conversions available for this file.")
        else:
            target = st.selectbox("Convert to", choices, format_func=str.upper)
            if st.button("Convert", type="primary"):
                started = time.monotonic()
                with st.spinner("Converting..."):
                    result = _convert(uploaded, target)
                if result is not None:
                    st.session_state["result"] = result
                    st.session_state["result_name"] = f"converted.{target}"
                    st.session_state.pop("error", None)
                    st.toast(f"Converted in {time.monotonic() - started:.1f}s", icon="✅")
                else:
                    _clear_result(st.session_state)

    if "result" in st.session_state:
        st.success("Conversion complete!")
        st.download_button(
            label="Download",
            data=st.session_state["result"],
            file_name=st.session_state["result_name"],
            mime="application/octet-stream",
        )

    if err := st.session_state.get("error"):
        st.error(err)


def run() -> None:
    """Launch the Streamlit front-end (``streamlit run`` on this module)."""
    from streamlit.web import cli as stcli
    import sys

    sys.argv = ["streamlit", "run", __file__]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
