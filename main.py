# main.py

"""Streamlit web UI for PharmaShe.

Lets the user build a list of drugs enriched with Drugs@FDA data, request a
women's health focused interaction analysis, and look up the complex medical
terms highlighted in the result.
"""

import streamlit as st
import logging
from pharmashe.logging_config import configure_logging
from pharmashe.service.config import settings
from pharmashe.service.pipeline import analyze_drugs, lookup_definition, search_drugs
from pharmashe.service.profile_store import ProfileStore
from pharmashe.engine.markdown import highlight_terms
from pharmashe.logic.validators import parse_drug_names
from pharmashe.logic.profile import bmi_category, has_content, profile_bmi
from pharmashe.core.definitions import BlockKind
from pharmashe.core.domain import DrugInfo, UserProfile

configure_logging(settings.log_level)

logger = logging.getLogger(__name__)

DISCLAIMER = (
    "**Disclaimer:** This analysis is for informational purposes only. Always "
    "consult with a healthcare provider before making decisions about "
    "medications, especially regarding interactions and women-specific health "
    "concerns."
)

WOMEN_HEALTH_CONSIDERATIONS = {
    "Hormonal Interactions": (
        "Many drugs can interact with hormonal contraceptives, hormone "
        "replacement therapy, or menstrual cycles. This analysis includes "
        "specific checks for these interactions."
    ),
    "Pregnancy & Breastfeeding": (
        "Certain drugs are contraindicated during pregnancy or breastfeeding. "
        "Always consult with your OB/GYN if you are pregnant, planning to "
        "become pregnant, or breastfeeding."
    ),
    "Dosage Differences": (
        "Women often require different dosages than men due to differences in "
        "body composition, metabolism, and hormonal factors."
    ),
    "Side Effect Profiles": (
        "Some side effects are more prevalent or pronounced in women. The "
        "analysis addresses women-centric side effect concerns."
    ),
}


def _init_state() -> None:
    defaults = {
        "drugs": [],
        "drug_details": {},
        "result": None,
        "selected_term": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def _add_drugs(raw: str) -> None:
    for name in parse_drug_names(raw):
        if name.lower() in (d.lower() for d in st.session_state.drugs):
            continue
        st.session_state.drugs.append(name)

        with st.spinner(f"Fetching FDA data for {name}..."):
            found = search_drugs(name)
        if found.results:
            st.session_state.drug_details[name] = found.results[0]
        else:
            st.session_state.drug_details[name] = DrugInfo(name=name)


def _remove_drug(name: str) -> None:
    st.session_state.drugs = [d for d in st.session_state.drugs if d != name]
    st.session_state.drug_details.pop(name, None)


def render_profile_sidebar(store: ProfileStore) -> UserProfile:
    """Profile editor; returns the profile currently saved on this device."""
    profile = store.load()

    st.header("My Profile")
    st.caption(
        "Your information is stored only on this device and is used to "
        "personalize drug considerations."
    )

    with st.form("profile_form"):
        col1, col2 = st.columns(2)
        height = col1.text_input("Height (cm)", value=profile.height_cm, placeholder="e.g. 165")
        weight = col2.text_input("Weight (kg)", value=profile.weight_kg, placeholder="e.g. 65")
        conditions = st.text_area(
            "Underlying conditions",
            value=profile.underlying_conditions,
            placeholder="e.g. hypertension, type 2 diabetes, anxiety",
        )
        concerns = st.text_area(
            "Health concerns or notes",
            value=profile.concerns,
            placeholder="e.g. pregnancy plans, breastfeeding, drug sensitivities",
        )
        if st.form_submit_button("Save profile"):
            profile = store.save(
                UserProfile(
                    height_cm=height,
                    weight_kg=weight,
                    underlying_conditions=conditions,
                    concerns=concerns,
                )
            )
            st.success("Profile saved.")

    bmi = profile_bmi(profile)
    if bmi is not None:
        st.metric("BMI", bmi, help="For reference only.")
        st.caption(
            f"Category: {bmi_category(bmi)}. Discuss weight and health goals "
            "with your provider."
        )

    if st.button("Clear profile data"):
        store.clear()
        logger.info("Profile cleared from UI")
        st.rerun()

    return profile


def render_drug_search() -> None:
    st.subheader("Drugs")
    st.caption(
        "Enter one or more medications to analyze interactions and women's "
        "health considerations. Active ingredients from the FDA database are "
        "shown below."
    )

    with st.form("drug_form", clear_on_submit=True):
        raw = st.text_input(
            "Drug name", placeholder="Enter drug name (e.g., Ibuprofen, Metformin)"
        )
        if st.form_submit_button("Query") and raw.strip():
            _add_drugs(raw)

    for name in list(st.session_state.drugs):
        info = st.session_state.drug_details.get(name, DrugInfo(name=name))
        col1, col2 = st.columns([5, 1])
        with col1:
            st.markdown(f"**{info.name}**")
            if info.active_ingredients:
                st.caption("Active: " + ", ".join(info.active_ingredients))
            else:
                st.caption("No FDA ingredient data found")
            details = [v for v in (info.dosage_form, info.route, info.manufacturer) if v]
            if details:
                st.caption(" | ".join(details))
        with col2:
            st.button("Remove", key=f"remove_{name}", on_click=_remove_drug, args=(name,))


def render_definition(term: str) -> None:
    with st.container(border=True):
        col1, col2 = st.columns([5, 1])
        col1.markdown(f"#### {term.capitalize()}")
        if col2.button("Close", key="close_definition"):
            st.session_state.selected_term = None
            st.rerun()

        with st.spinner("Loading definition..."):
            result = lookup_definition(term)

        if not result.found:
            st.write("Definition not available")
            st.caption("Try searching online for medical terminology definitions.")
        else:
            for d in result.definitions:
                st.caption(d.part_of_speech.upper())
                st.write(d.definition)

        st.caption("Definitions from Free Dictionary API")


def render_analysis(result) -> None:
    st.subheader("Analysis Results")
    st.caption(f"Analyzing: {', '.join(result.drugs)}")

    col1, col2 = st.columns(2)
    col1.download_button(
        "Download", data=result.analysis, file_name="pharmashe-analysis.md"
    )
    if col2.button("New Search"):
        st.session_state.result = None
        st.session_state.drugs = []
        st.session_state.drug_details = {}
        st.session_state.selected_term = None
        st.rerun()

    with st.container(border=True):
        for block in result.blocks:
            if block.kind == BlockKind.SPACER:
                st.write("")
            elif block.kind == BlockKind.HEADING:
                st.markdown("## " + highlight_terms(block.segments))
            elif block.kind == BlockKind.SUBHEADING:
                st.markdown("### " + highlight_terms(block.segments))
            else:
                st.markdown(highlight_terms(block.segments))

    if result.terms:
        st.markdown("**Medical terms** (click for a definition)")
        columns = st.columns(4)
        for idx, term in enumerate(result.terms):
            if columns[idx % 4].button(term, key=f"term_{term}"):
                # The most recent click owns the definition panel
                st.session_state.selected_term = term

    if st.session_state.selected_term:
        render_definition(st.session_state.selected_term)

    st.info(DISCLAIMER)


def main():
    """Run the Streamlit application UI."""
    st.set_page_config(layout="wide", page_title="PharmaShe", page_icon="💊")
    _init_state()

    st.title("PharmaShe")
    st.markdown("Women's Health Drug Interaction & Analysis Platform")
    st.markdown("---")

    with st.sidebar:
        profile = render_profile_sidebar(ProfileStore(settings.profile_path))

    col1, col2 = st.columns([1, 2])

    with col1:
        render_drug_search()

        if st.button(
            "Analyze", type="primary", disabled=not st.session_state.drugs
        ):
            try:
                with st.spinner("Analyzing drugs..."):
                    logger.info(
                        "Analysis requested from UI",
                        extra={"drug_count": len(st.session_state.drugs)},
                    )
                    result = analyze_drugs(
                        st.session_state.drugs,
                        profile=profile if has_content(profile) else None,
                    )
                st.session_state.selected_term = None
                st.session_state.result = result

            except Exception:
                st.error("An unexpected error occurred during analysis.")
                logger.error("Unexpected error in main application loop", exc_info=True)

        with st.expander("Women's Health Considerations"):
            for title, text in WOMEN_HEALTH_CONSIDERATIONS.items():
                st.markdown(f"**{title}**")
                st.write(text)

    with col2:
        result = st.session_state.result
        if result is None:
            st.info("Add drugs and press Analyze to see results.")
        elif "error" in result.metadata:
            st.error(result.metadata.get("details") or result.metadata["error"])
        else:
            render_analysis(result)


if __name__ == "__main__":
    main()
