import streamlit as st

from auth import AuthContext
from views.shared_ui import APP_NAME, render_brand, render_footer


def render_login(auth: AuthContext):
    _, center, _ = st.columns([1, 1.4, 1])
    with center:
        render_brand()
        st.subheader(f"Welcome to {APP_NAME}")
        st.caption("Please sign in to access your dashboard.")

        with st.form("login_form", clear_on_submit=False):
            email = st.text_input("Email", placeholder="you@example.com")
            password = st.text_input("Password", type="password", placeholder="••••••••")
            submitted = st.form_submit_button("Sign In", type="primary", use_container_width=True)

        if submitted:
            if not email or not password:
                st.error("Email and password are required.")
            else:
                with st.spinner("Signing in..."):
                    result = auth.sign_in_with_password(email, password)
                if result.ok:
                    st.rerun()
                else:
                    st.error(result.error)

        st.caption("Don't have an account? Ask your administrator to create one in Supabase.")
    render_footer()
